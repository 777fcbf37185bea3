"""Models for Open Food Facts search results."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

WATER_MARKER = "water"


class OpenFoodFactsNutriments(BaseModel):
    """Nutrient values reported for a product; any of them may be missing."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    energy_kcal_computed: float | None = Field(
        default=None, alias="energy-kcal_value_computed"
    )
    energy_kcal_100g: float | None = Field(default=None, alias="energy-kcal_100g")
    proteins_100g: float | None = None
    carbohydrates_100g: float | None = None
    fat_100g: float | None = None

    @field_validator(
        "energy_kcal_computed",
        "energy_kcal_100g",
        "proteins_100g",
        "carbohydrates_100g",
        "fat_100g",
        mode="before",
    )
    @classmethod
    def _coerce_number(cls, value: object) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int | float):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return None
        return None

    def energy_kcal(self) -> float | None:
        """Return computed energy, falling back to energy per 100g."""
        if self.energy_kcal_computed:
            return self.energy_kcal_computed
        return self.energy_kcal_100g


class OpenFoodFactsProduct(BaseModel):
    """Single product candidate from a search."""

    model_config = ConfigDict(extra="ignore")

    product_name: str | None = None
    brands: str | None = None
    categories: str | None = None
    nutriments: OpenFoodFactsNutriments = Field(
        default_factory=OpenFoodFactsNutriments
    )

    @field_validator("nutriments", mode="before")
    @classmethod
    def _default_nutriments(cls, value: object) -> object:
        return value if isinstance(value, dict) else {}

    def is_water(self) -> bool:
        """Return True when the product is named or categorized as water."""
        name = (self.product_name or "").lower()
        categories = (self.categories or "").lower()
        return WATER_MARKER in name or WATER_MARKER in categories

    def mentions(self, term: str) -> bool:
        """Return True when the name or categories contain the search term."""
        name = (self.product_name or "").lower()
        categories = (self.categories or "").lower()
        return term in name or term in categories

    def primary_category(self, default: str) -> str:
        """Return the first comma-separated category segment."""
        if not self.categories:
            return default
        segment = self.categories.split(",")[0].strip()
        return segment or default


class OpenFoodFactsSearchResult(BaseModel):
    """Search response payload."""

    model_config = ConfigDict(extra="ignore")

    products: list[OpenFoodFactsProduct] = Field(default_factory=list)

    @field_validator("products", mode="before")
    @classmethod
    def _default_products(cls, value: object) -> object:
        return [] if value is None else value


def select_best_candidate(
    term: str, products: list[OpenFoodFactsProduct]
) -> OpenFoodFactsProduct | None:
    """Pick the best product for a normalized search term.

    Prefers a relevant non-water product, then any non-water product, then the
    first product returned.
    """
    if not products:
        return None
    first_non_water: OpenFoodFactsProduct | None = None
    for product in products:
        if product.is_water():
            continue
        if product.mentions(term):
            return product
        if first_non_water is None:
            first_non_water = product
    return first_non_water or products[0]
