"""Feature catalog: profiles, features and the static feature -> template table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Union

from wintune.errors import InvalidArgumentError
from wintune.models import ConfigScalar

from .actions import PowerTier, ReportKind, RunState, StartMode, ValueType


class Profile(str, Enum):
    GAMING = "Gaming"
    OFFICE = "Office"
    LAPTOP = "Laptop"
    MINIMAL = "Minimal"


class Feature(str, Enum):
    WIDGETS = "Widgets"
    COPILOT = "Copilot"
    CONSUMER_FEATURES = "ConsumerFeatures"
    TIPS = "Tips"
    NOTIFICATIONS = "Notifications"
    DELIVERY_OPTIMIZATION = "DeliveryOptimization"
    GAME_DVR = "GameDVR"
    TELEMETRY = "Telemetry"
    MENU_SHOW_DELAY = "MenuShowDelay"
    SEARCH_INDEXING = "SearchIndexing"
    SYSMAIN = "SysMain"
    XBOX_SERVICES = "XboxServices"
    POWER_PLAN = "PowerPlan"
    STARTUP_REPORT = "StartupReport"
    SNAPSHOT = "Snapshot"


# powercfg scheme GUIDs.
BALANCED_SCHEME_ID: str = "381b4222-f694-41f0-9685-ff5bb260df2e"
HIGH_PERFORMANCE_SCHEME_ID: str = "8c5e7fda-e8bf-4a96-9a85-a6e23a8c635c"
ULTIMATE_PERFORMANCE_TEMPLATE_ID: str = "e9a42b02-d5df-448d-aa00-03f14749eb61"

_CDM = r"HKCU\Software\Microsoft\Windows\CurrentVersion\ContentDeliveryManager"
_POLICIES = r"HKLM\SOFTWARE\Policies\Microsoft\Windows"


@dataclass(slots=True, frozen=True)
class RegistryTemplate:
    path: str
    name: str
    value_type: ValueType
    desired: ConfigScalar


@dataclass(slots=True, frozen=True)
class ServiceTemplate:
    name: str
    start_mode: StartMode
    run_state: RunState


@dataclass(slots=True, frozen=True)
class PowerTemplate:
    tier: PowerTier


@dataclass(slots=True, frozen=True)
class ReportTemplate:
    kind: ReportKind


Template = Union[RegistryTemplate, ServiceTemplate, PowerTemplate, ReportTemplate]
ExpansionRule = Callable[[Profile], list[Template]]


def _int(path: str, name: str, desired: int) -> RegistryTemplate:
    return RegistryTemplate(path=path, name=name, value_type=ValueType.INT, desired=desired)


def _gaming_or(profile: Profile, gaming: ServiceTemplate, other: ServiceTemplate) -> ServiceTemplate:
    return gaming if profile is Profile.GAMING else other


def _tips(profile: Profile) -> list[Template]:
    return [
        _int(_CDM, "SubscribedContent-338389Enabled", 0),
        _int(_CDM, "SystemPaneSuggestionsEnabled", 0),
        _int(_CDM, "SoftLandingEnabled", 0),
    ]


def _notifications(profile: Profile) -> list[Template]:
    toast = 0 if profile is Profile.GAMING else 1
    return [_int(r"HKCU\Software\Microsoft\Windows\CurrentVersion\PushNotifications", "ToastEnabled", toast)]


def _game_dvr(profile: Profile) -> list[Template]:
    return [
        _int(r"HKCU\System\GameConfigStore", "GameDVR_Enabled", 0),
        _int(_POLICIES + r"\GameDVR", "AllowGameDVR", 0),
    ]


def _telemetry(profile: Profile) -> list[Template]:
    return [
        _int(_POLICIES + r"\DataCollection", "AllowTelemetry", 1),
        ServiceTemplate("DiagTrack", StartMode.DISABLED, RunState.STOPPED),
    ]


def _menu_show_delay(profile: Profile) -> list[Template]:
    delay = "0" if profile is Profile.GAMING else "100"
    return [
        RegistryTemplate(
            path=r"HKCU\Control Panel\Desktop",
            name="MenuShowDelay",
            value_type=ValueType.STRING,
            desired=delay,
        )
    ]


def _toggled_service(name: str) -> ExpansionRule:
    def rule(profile: Profile) -> list[Template]:
        return [
            _gaming_or(
                profile,
                ServiceTemplate(name, StartMode.DISABLED, RunState.STOPPED),
                ServiceTemplate(name, StartMode.AUTOMATIC, RunState.RUNNING),
            )
        ]

    return rule


_XBOX_SERVICES: tuple[str, ...] = ("XblAuthManager", "XblGameSave", "XboxGipSvc", "XboxNetApiSvc")


def _xbox_services(profile: Profile) -> list[Template]:
    return [
        _gaming_or(
            profile,
            ServiceTemplate(name, StartMode.MANUAL, RunState.STOPPED),
            ServiceTemplate(name, StartMode.DISABLED, RunState.STOPPED),
        )
        for name in _XBOX_SERVICES
    ]


def _power_plan(profile: Profile) -> list[Template]:
    if profile is Profile.GAMING:
        return [PowerTemplate(PowerTier.ULTIMATE_PERFORMANCE)]
    return [PowerTemplate(PowerTier.BALANCED)]


# Feature.SNAPSHOT has no rule: the builder brackets the whole plan instead.
FEATURE_RULES: dict[Feature, ExpansionRule] = {
    Feature.WIDGETS: lambda p: [_int(r"HKLM\SOFTWARE\Policies\Microsoft\Dsh", "AllowNewsAndInterests", 0)],
    Feature.COPILOT: lambda p: [
        _int(r"HKCU\Software\Policies\Microsoft\Windows\WindowsCopilot", "TurnOffWindowsCopilot", 1)
    ],
    Feature.CONSUMER_FEATURES: lambda p: [
        _int(_POLICIES + r"\CloudContent", "DisableWindowsConsumerFeatures", 1)
    ],
    Feature.TIPS: _tips,
    Feature.NOTIFICATIONS: _notifications,
    Feature.DELIVERY_OPTIMIZATION: lambda p: [_int(_POLICIES + r"\DeliveryOptimization", "DODownloadMode", 0)],
    Feature.GAME_DVR: _game_dvr,
    Feature.TELEMETRY: _telemetry,
    Feature.MENU_SHOW_DELAY: _menu_show_delay,
    Feature.SEARCH_INDEXING: _toggled_service("WSearch"),
    Feature.SYSMAIN: _toggled_service("SysMain"),
    Feature.XBOX_SERVICES: _xbox_services,
    Feature.POWER_PLAN: _power_plan,
    Feature.STARTUP_REPORT: lambda p: [ReportTemplate(ReportKind.STARTUP_ENTRIES)],
}

PROFILE_DEFAULTS: dict[Profile, tuple[Feature, ...]] = {
    Profile.GAMING: (
        Feature.WIDGETS,
        Feature.CONSUMER_FEATURES,
        Feature.TIPS,
        Feature.NOTIFICATIONS,
        Feature.GAME_DVR,
        Feature.MENU_SHOW_DELAY,
        Feature.SEARCH_INDEXING,
        Feature.SYSMAIN,
        Feature.XBOX_SERVICES,
        Feature.POWER_PLAN,
        Feature.SNAPSHOT,
    ),
    Profile.OFFICE: (
        Feature.WIDGETS,
        Feature.COPILOT,
        Feature.CONSUMER_FEATURES,
        Feature.TIPS,
        Feature.TELEMETRY,
        Feature.DELIVERY_OPTIMIZATION,
        Feature.XBOX_SERVICES,
        Feature.POWER_PLAN,
        Feature.STARTUP_REPORT,
    ),
    Profile.LAPTOP: (
        Feature.WIDGETS,
        Feature.TIPS,
        Feature.DELIVERY_OPTIMIZATION,
        Feature.POWER_PLAN,
        Feature.STARTUP_REPORT,
    ),
    Profile.MINIMAL: (
        Feature.WIDGETS,
        Feature.TIPS,
    ),
}


def parse_profile(value: Union[str, Profile]) -> Profile:
    """Convert a profile name (case-insensitive) to Profile."""
    if isinstance(value, Profile):
        return value
    for profile in Profile:
        if profile.value.lower() == str(value).strip().lower():
            return profile
    raise InvalidArgumentError(f"Unknown profile: {value}", details={"profile": value})


def normalize_features(values: Iterable[Union[str, Feature]]) -> tuple[Feature, ...]:
    """
    Convert feature names to Feature, keeping first-occurrence order.

    Raises:
        InvalidArgumentError: on an unknown feature name.
    """
    by_name = {f.value.lower(): f for f in Feature}
    seen: list[Feature] = []
    for value in values:
        if isinstance(value, Feature):
            feature = value
        else:
            feature = by_name.get(str(value).strip().lower())  # type: ignore[assignment]
            if feature is None:
                raise InvalidArgumentError(f"Unknown feature: {value}", details={"feature": value})
        if feature not in seen:
            seen.append(feature)
    return tuple(seen)


def features_for(profile: Profile, requested: Iterable[Union[str, Feature]] = ()) -> tuple[Feature, ...]:
    """Return requested features, or the profile defaults when none were requested."""
    features = normalize_features(requested)
    if features:
        return features
    return PROFILE_DEFAULTS.get(profile, ())


@dataclass(slots=True, frozen=True)
class SnapshotTargets:
    registry: tuple[tuple[str, str], ...]
    services: tuple[str, ...]


def snapshot_targets() -> SnapshotTargets:
    """
    Collect every registry value and service the catalog can touch.

    Templates are expanded for every profile so profile-dependent rules are
    covered; order follows the Feature enum and is de-duplicated.
    """
    registry: list[tuple[str, str]] = []
    services: list[str] = []
    for feature, rule in FEATURE_RULES.items():
        for profile in Profile:
            for template in rule(profile):
                if isinstance(template, RegistryTemplate):
                    key = (template.path, template.name)
                    if key not in registry:
                        registry.append(key)
                elif isinstance(template, ServiceTemplate):
                    if template.name not in services:
                        services.append(template.name)
    return SnapshotTargets(registry=tuple(registry), services=tuple(services))
