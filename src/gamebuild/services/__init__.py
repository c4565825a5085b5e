"""Domain services, one class per backend area, all over :class:`ApiClient`."""

from .ad import AdService
from .analytics import AnalyticsService
from .asset import AssetService
from .auth import AuthService
from .base import ApiClient, BaseService
from .build import BuildService
from .deploy import DeployService
from .game import GameService
from .guild import GuildService
from .identity import IdentityService

__all__ = [
    "AdService",
    "AnalyticsService",
    "ApiClient",
    "AssetService",
    "AuthService",
    "BaseService",
    "BuildService",
    "DeployService",
    "GameService",
    "GuildService",
    "IdentityService",
]
