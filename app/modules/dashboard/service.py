from supabase import Client
from app.config import settings
from app.config.roles_config import get_role_directory
from app.core.cache import TTLCache
from app.core.errors import store_error
from app.modules.dashboard.schemas import DashboardStats, RoleInfo
from typing import List

DASHBOARD_STATS_CACHE_KEY = "dashboard-stats"


class DashboardService:
    def __init__(self, supabase: Client, cache: TTLCache):
        self.supabase = supabase
        self.cache = cache

    def get_stats(self) -> DashboardStats:
        """Tool, category and user counts (cached for dashboard_cache_ttl seconds)"""
        return self.cache.get_or_set(DASHBOARD_STATS_CACHE_KEY, self._count_all, settings.dashboard_cache_ttl)

    def _count_all(self) -> DashboardStats:
        try:
            counts = {
                name: self.supabase.table(table).select("id", count="exact").execute().count or 0
                for name, table in (("tools", "ai_tools"), ("categories", "categories"), ("users", "profiles"))
            }
        except Exception as e:
            raise store_error("Error counting dashboard stats", e)
        return DashboardStats(**counts)

    def role_directory(self) -> List[RoleInfo]:
        return [RoleInfo(**r) for r in get_role_directory()]
