"""Request, response and upstream payload schemas."""

from deals_to_meals.schemas.common import SuccessResponse
from deals_to_meals.schemas.coupons import (
    CartItem,
    CartRequest,
    Coupon,
    CouponsResponse,
)
from deals_to_meals.schemas.deals import DealItem, DealsResponse, Store, StoresResponse
from deals_to_meals.schemas.profile import (
    ProfileResponse,
    ProfileUpdate,
    SavedRecipe,
    SavedRecipeCreate,
    SavedRecipesResponse,
)
from deals_to_meals.schemas.recipes import (
    EnrichedRecipe,
    RecipeSearchRequest,
    RecipeSearchResponse,
)
from deals_to_meals.schemas.site import SiteLoginRequest


__all__ = [
    "CartItem",
    "CartRequest",
    "Coupon",
    "CouponsResponse",
    "DealItem",
    "DealsResponse",
    "EnrichedRecipe",
    "ProfileResponse",
    "ProfileUpdate",
    "RecipeSearchRequest",
    "RecipeSearchResponse",
    "SavedRecipe",
    "SavedRecipeCreate",
    "SavedRecipesResponse",
    "SiteLoginRequest",
    "Store",
    "StoresResponse",
    "SuccessResponse",
]
