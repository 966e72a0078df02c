"""Plan builder: deterministic feature -> action expansion."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from wintune.errors import CapabilityUnavailableError, WinTuneError, is_fatal
from wintune.host.accessor import HostAccessor

from .actions import Action, ActionType, SnapshotStage
from .capture import (
    capture_power_plan,
    capture_registry_value,
    capture_service_state,
    report_action,
    snapshot_action,
)
from .features import (
    FEATURE_RULES,
    Feature,
    PowerTemplate,
    RegistryTemplate,
    ReportTemplate,
    ServiceTemplate,
    Template,
)

if TYPE_CHECKING:
    from wintune.context import RunContext

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CaptureFailure:
    """A feature left out of the plan because its previous state could not be read."""

    feature: str
    action_type: ActionType
    error: WinTuneError


@dataclass(slots=True)
class PlanBuild:
    actions: list[Action] = field(default_factory=list)
    failures: list[CaptureFailure] = field(default_factory=list)


def build_plan(host: HostAccessor, ctx: RunContext) -> list[Action]:
    """Expand ctx.features into a Plan. See collect_plan for the rules."""
    return collect_plan(host, ctx).actions


def collect_plan(host: HostAccessor, ctx: RunContext) -> PlanBuild:
    """
    Expand ctx.features (in order) into a Plan plus the features that failed capture.

    Rules:
        - Each feature dispatches through FEATURE_RULES with ctx.profile.
        - Features without a rule are skipped (no error).
        - If Feature.SNAPSHOT is requested, Snapshot(Before) is the first action
          and Snapshot(After) the last, wherever SNAPSHOT appeared in the input.
        - A feature whose previous state cannot be read is left out entirely
          and reported in PlanBuild.failures.

    Raises:
        PreconditionFailedError / ManifestError: fatal errors from the host.
    """
    build = PlanBuild()

    for feature in ctx.features:
        if feature is Feature.SNAPSHOT:
            continue

        rule = FEATURE_RULES.get(feature)
        if rule is None:
            logger.warning("No expansion rule for feature %s (profile %s); skipped",
                           feature.value, ctx.profile.value)
            continue

        actions: list[Action] = []
        for template in rule(ctx.profile):
            try:
                actions.append(_capture(host, feature, template))
            except (WinTuneError, OSError) as exc:
                if is_fatal(exc):
                    raise
                err = _as_capability_error(exc, feature)
                logger.error("Feature %s left out of the plan: %s", feature.value, err)
                build.failures.append(
                    CaptureFailure(feature=feature.value, action_type=_template_type(template), error=err)
                )
                break
        else:
            build.actions.extend(actions)

    if Feature.SNAPSHOT in ctx.features:
        name = Feature.SNAPSHOT.value
        build.actions.insert(0, snapshot_action(name, SnapshotStage.BEFORE))
        build.actions.append(snapshot_action(name, SnapshotStage.AFTER))

    logger.debug("Built plan with %d actions for %d features (%d failed capture)",
                 len(build.actions), len(ctx.features), len(build.failures))
    return build


def _capture(host: HostAccessor, feature: Feature, template: Template) -> Action:
    name = feature.value

    if isinstance(template, RegistryTemplate):
        return capture_registry_value(
            host, name, template.path, template.name, template.value_type, template.desired
        )

    if isinstance(template, ServiceTemplate):
        return capture_service_state(host, name, template.name, template.start_mode, template.run_state)

    if isinstance(template, PowerTemplate):
        return capture_power_plan(host, name, template.tier)

    if isinstance(template, ReportTemplate):
        return report_action(name, template.kind)

    raise TypeError(f"Unsupported template: {template!r}")


def _template_type(template: Template) -> ActionType:
    if isinstance(template, RegistryTemplate):
        return ActionType.REGISTRY_VALUE
    if isinstance(template, ServiceTemplate):
        return ActionType.SERVICE_STATE
    if isinstance(template, PowerTemplate):
        return ActionType.POWER_PLAN
    return ActionType.REPORT


def _as_capability_error(exc: BaseException, feature: Feature) -> WinTuneError:
    if isinstance(exc, CapabilityUnavailableError):
        return exc
    return CapabilityUnavailableError(
        f"Cannot capture previous state for {feature.value}: {exc}",
        details={"feature": feature.value, "error_type": exc.__class__.__name__},
        cause=exc,
    )
