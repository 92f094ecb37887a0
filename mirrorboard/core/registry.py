"""Widget type registry passed explicitly to the layout engine and UI."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from mirrorboard.infra.errors import WidgetRequestError


class WidgetCategory(StrEnum):
    """Grouping used by the add-widget picker."""

    HOME = "home"
    MEDIA = "media"
    PRODUCTIVITY = "productivity"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class WidgetSize:
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class ConfigRequirement:
    """A configuration key a widget needs before it can show data."""

    key: str
    label: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class WidgetType:
    """Metadata describing one kind of dashboard widget."""

    id: str
    name: str
    icon: str
    description: str
    default_size: WidgetSize
    category: WidgetCategory = WidgetCategory.OTHER
    min_size: WidgetSize = WidgetSize(1, 1)
    required_config: tuple[ConfigRequirement, ...] = ()
    required_env: tuple[ConfigRequirement, ...] = ()
    data_endpoint: str | None = None
    setup_name: str | None = None
    config_message: str | None = None
    config_hint: str | None = None

    @property
    def setup_slug(self) -> str:
        """Path segment used by the backend setup endpoints."""
        return self.setup_name or self.id

    @property
    def not_connected_message(self) -> str:
        return self.config_message or f"{self.name} Not Connected"

    @property
    def required_params(self) -> list[str]:
        """Combined config and environment keys the widget depends on."""
        return [item.key for item in self.required_config] + [item.key for item in self.required_env]


@dataclass(slots=True)
class WidgetTypeRegistry:
    """Ordered mapping of widget type id to metadata."""

    _types: dict[str, WidgetType] = field(default_factory=dict)

    def register(self, widget_type: WidgetType) -> None:
        if widget_type.id in self._types:
            raise ValueError(f"Widget type '{widget_type.id}' is already registered.")
        self._types[widget_type.id] = widget_type

    def get(self, type_id: str) -> WidgetType | None:
        return self._types.get(type_id)

    def require(self, type_id: str) -> WidgetType:
        widget_type = self._types.get(type_id)
        if widget_type is None:
            raise WidgetRequestError(f"Unknown widget type '{type_id}'.")
        return widget_type

    def all(self) -> list[WidgetType]:
        return list(self._types.values())

    def by_category(self) -> dict[WidgetCategory, list[WidgetType]]:
        """Group types by category, keeping first-seen category order."""
        grouped: dict[WidgetCategory, list[WidgetType]] = {}
        for widget_type in self._types.values():
            grouped.setdefault(widget_type.category, []).append(widget_type)
        return grouped

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._types

    def __iter__(self) -> Iterator[WidgetType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)


def default_registry() -> WidgetTypeRegistry:
    """Registry with every widget shipped with the dashboard."""
    registry = WidgetTypeRegistry()
    for widget_type in _BUILTIN_TYPES:
        registry.register(widget_type)
    return registry


_BUILTIN_TYPES: tuple[WidgetType, ...] = (
    WidgetType(
        id="calendar",
        name="Calendar",
        icon="📅",
        description="Google Calendar with events and reminders",
        default_size=WidgetSize(4, 4),
        category=WidgetCategory.PRODUCTIVITY,
        required_config=(
            ConfigRequirement("trash_day", "Trash Day"),
            ConfigRequirement("reminders", "Reminders"),
        ),
        data_endpoint="/calendar/events",
        config_message="Calendar Not Connected",
        config_hint="Connect a Google account to show upcoming events",
    ),
    WidgetType(
        id="tesla",
        name="Tesla",
        icon="🚗",
        description="Tesla vehicle status and charging info",
        default_size=WidgetSize(1, 1),
        category=WidgetCategory.HOME,
        required_config=(ConfigRequirement("tesla_name", "Tesla Name"),),
        required_env=(
            ConfigRequirement("TESSIE_API_KEY", "Tessie API Key", "Get your API key from https://tessie.com"),
            ConfigRequirement("TESSIE_VIN", "Tesla VIN"),
        ),
        data_endpoint="/tesla",
    ),
    WidgetType(
        id="weather",
        name="Weather",
        icon="🌤️",
        description="Current weather and forecast",
        default_size=WidgetSize(1, 1),
        category=WidgetCategory.HOME,
        required_config=(
            ConfigRequirement("latitude", "Latitude", "Your location latitude (e.g., 39.7392)"),
            ConfigRequirement("longitude", "Longitude", "Your location longitude (e.g., -104.9903)"),
            ConfigRequirement("location_name", "Location Name (Optional)"),
        ),
        required_env=(ConfigRequirement("OPENWEATHER_API_KEY", "OpenWeather API Key"),),
        data_endpoint="/weather",
        config_message="Weather Not Configured",
        config_hint="Add latitude and longitude to widget config, and OPENWEATHER_API_KEY to .env",
    ),
    WidgetType(
        id="plants",
        name="Plant Sensors",
        icon="🌱",
        description="Soil moisture levels for plants",
        default_size=WidgetSize(1, 2),
        category=WidgetCategory.HOME,
        required_env=(
            ConfigRequirement("ECOWITT_APPLICATION_KEY", "Ecowitt Application Key"),
            ConfigRequirement("ECOWITT_API_KEY", "Ecowitt API Key"),
            ConfigRequirement("ECOWITT_GATEWAY_MAC", "Ecowitt Gateway MAC"),
        ),
        data_endpoint="/ecowitt",
        setup_name="ecowitt",
    ),
    WidgetType(
        id="meals",
        name="Meal Calendar",
        icon="🍽️",
        description="Upcoming meal planning",
        default_size=WidgetSize(1, 1),
        category=WidgetCategory.PRODUCTIVITY,
        required_config=(ConfigRequirement("calendar_url", "Calendar URL"),),
        data_endpoint="/meals",
    ),
    WidgetType(
        id="photos",
        name="Photo Carousel",
        icon="📸",
        description="Rotating photo display",
        default_size=WidgetSize(1, 2),
        category=WidgetCategory.MEDIA,
        required_config=(ConfigRequirement("photo_rotation_seconds", "Photo Rotation Interval"),),
        data_endpoint="/photos/list",
    ),
    WidgetType(
        id="traeger",
        name="Traeger Grill",
        icon="🔥",
        description="Monitor your Traeger grill temperature, probes, and pellet level",
        default_size=WidgetSize(1, 1),
        category=WidgetCategory.HOME,
        required_config=(ConfigRequirement("grill_name", "Grill Name"),),
        required_env=(
            ConfigRequirement("TRAEGER_USERNAME", "Traeger Username"),
            ConfigRequirement("TRAEGER_PASSWORD", "Traeger Password"),
        ),
        data_endpoint="/traeger",
    ),
)
