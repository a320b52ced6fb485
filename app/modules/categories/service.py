from supabase import Client
from app.modules.categories.schemas import CategoryCreate, CategoryUpdate, CategoryResponse
from app.modules.activity.schemas import ActivityAction, ResourceType
from app.modules.activity.service import ActivityLogger
from app.config import settings
from app.core.cache import TTLCache
from app.core.errors import forbidden, not_found, store_error
from app.core.messages import msg
from app.core.policy import can_delete_category
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

CATEGORIES_CACHE_KEY = "categories"


class CategoryService:
    def __init__(self, supabase: Client, cache: TTLCache, activity: Optional[ActivityLogger] = None):
        self.supabase = supabase
        self.cache = cache
        self.activity = activity

    def list_categories(self) -> List[CategoryResponse]:
        """All categories ordered by name (cached)"""
        return self.cache.get_or_set(CATEGORIES_CACHE_KEY, self._fetch_categories, settings.category_cache_ttl)

    def _fetch_categories(self) -> List[CategoryResponse]:
        try:
            result = self.supabase.table("categories").select("*").order("name").execute()
            return [CategoryResponse(**c) for c in result.data or []]
        except Exception as e:
            raise store_error("Error fetching categories", e)

    def get_category(self, category_id: str) -> CategoryResponse:
        try:
            result = self.supabase.table("categories")\
                .select("*")\
                .eq("id", category_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise store_error("Error fetching category", e)
        if result is None or not result.data:
            raise not_found("category_not_found")
        return CategoryResponse(**result.data)

    def create_category(self, data: CategoryCreate, actor) -> CategoryResponse:
        """Create a category (any authenticated user)"""
        self._ensure_unique_name(data.name)
        try:
            result = self.supabase.table("categories").insert({
                "name": data.name,
                "description": data.description,
                "color": data.color,
            }).execute()
        except Exception as e:
            raise self._write_error("Error creating category", e)
        if not result.data:
            raise store_error("Error creating category", RuntimeError("empty insert result"))
        category = CategoryResponse(**result.data[0])
        self.cache.invalidate_all()
        self._log(ActivityAction.CREATE_CATEGORY, actor, category.id, {"name": category.name, "color": category.color})
        return category

    def update_category(self, category_id: str, data: CategoryUpdate, actor) -> CategoryResponse:
        """Update a category (any authenticated user)"""
        update_data = {}
        if data.name:
            self._ensure_unique_name(data.name, exclude_id=category_id)
            update_data["name"] = data.name
        if data.description is not None:
            update_data["description"] = data.description
        if data.color:
            update_data["color"] = data.color
        if not update_data:
            return self.get_category(category_id)
        try:
            result = self.supabase.table("categories")\
                .update(update_data)\
                .eq("id", category_id)\
                .execute()
        except Exception as e:
            raise self._write_error("Error updating category", e)
        if not result.data:
            raise not_found("category_not_found")
        category = CategoryResponse(**result.data[0])
        self.cache.invalidate_all()
        self._log(ActivityAction.UPDATE_CATEGORY, actor, category.id, {"name": category.name, "changes": list(update_data)})
        return category

    def delete_category(self, category_id: str, actor) -> bool:
        """Delete a category (owner only). Tools keep existing with category_id cleared."""
        if not can_delete_category(actor):
            raise forbidden()
        category = self.get_category(category_id)
        try:
            self.supabase.table("ai_tools")\
                .update({"category_id": None})\
                .eq("category_id", category_id)\
                .execute()
            self.supabase.table("categories").delete().eq("id", category_id).execute()
        except Exception as e:
            raise store_error("Error deleting category", e)
        self.cache.invalidate_all()
        self._log(ActivityAction.DELETE_CATEGORY, actor, category_id, {"name": category.name})
        return True

    def _ensure_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        try:
            existing = self.supabase.table("categories").select("id").eq("name", name).execute()
        except Exception as e:
            raise store_error("Error checking category name", e)
        if any(row["id"] != exclude_id for row in existing.data or []):
            raise HTTPException(status_code=409, detail=msg("category_exists"))

    def _write_error(self, context: str, exc: Exception) -> HTTPException:
        if "duplicate" in str(exc).lower() or "unique" in str(exc).lower():
            return HTTPException(status_code=409, detail=msg("category_exists"))
        return store_error(context, exc)

    def _log(self, action: ActivityAction, actor, category_id: str, details: dict) -> None:
        if self.activity:
            self.activity.log(action, ResourceType.CATEGORY, user_id=actor.id, resource_id=category_id, details=details)
