"""Traffic split resolution."""

from typing import Dict, List, Optional, Sequence

from ..errors import ConsistencyFault, MalformedInput
from ..model.serving import ResolvedTarget, TrafficTarget
from ..utils.logger import get_logger

logger = get_logger(__name__)

TOTAL_PERCENT = 100


class TrafficResolver:
    """Turns a declared route into canonical latest/named routing rules.

    A target is rendered as ``latestRevision: true`` when the revision it
    resolves to is the configuration's latest ready revision, whether the
    route declared it through the latest flag or by name. Every other target
    names its revision explicitly. Declaration order is preserved and tagged
    targets are kept even when they carry no traffic.
    """

    def resolve(
        self,
        targets: Sequence[TrafficTarget],
        latest_ready_revision: Optional[str],
        tag_mapping: Optional[Dict[str, str]] = None,
    ) -> List[ResolvedTarget]:
        """Resolve declared targets in order."""
        if not targets:
            logger.debug("Route declares no traffic targets")
            return []

        tag_mapping = tag_mapping or {}
        total = sum(target.percent or 0 for target in targets)
        if total != TOTAL_PERCENT:
            raise MalformedInput(
                f"Traffic targets sum to {total}%, expected {TOTAL_PERCENT}%"
            )

        resolved = []
        for index, target in enumerate(targets):
            revision_name = self._resolve_revision(
                index, target, latest_ready_revision, tag_mapping
            )
            resolved.append(
                ResolvedTarget(
                    target=self._render(target, revision_name, latest_ready_revision),
                    revision_name=revision_name,
                )
            )
            logger.debug(
                f"Traffic target {index} -> {revision_name} "
                f"({target.percent or 0}%, tag={target.tag or '-'})"
            )

        return resolved

    def _resolve_revision(
        self,
        index: int,
        target: TrafficTarget,
        latest_ready_revision: Optional[str],
        tag_mapping: Dict[str, str],
    ) -> str:
        if target.latest_revision and target.revision_name:
            raise MalformedInput(
                f"Traffic target {index} sets both latestRevision and "
                f"revisionName ({target.revision_name})"
            )

        if target.revision_name:
            return target.revision_name

        if target.latest_revision:
            if not latest_ready_revision:
                raise ConsistencyFault(
                    f"Traffic target {index} follows the latest revision, "
                    "but the service reports no latest ready revision"
                )
            return latest_ready_revision

        if target.tag and target.tag in tag_mapping:
            return tag_mapping[target.tag]

        raise MalformedInput(
            f"Traffic target {index} names no revision and does not follow the latest one"
        )

    @staticmethod
    def _render(
        target: TrafficTarget, revision_name: str, latest_ready_revision: Optional[str]
    ) -> TrafficTarget:
        percent = target.percent or 0
        if revision_name == latest_ready_revision:
            return TrafficTarget(tag=target.tag, latest_revision=True, percent=percent)
        return TrafficTarget(
            tag=target.tag,
            revision_name=revision_name,
            latest_revision=False,
            percent=percent,
        )


def route_manifest(resolved: Sequence[ResolvedTarget]) -> List[Dict]:
    """Plain route entries for a manifest."""
    return [entry.target.to_manifest() for entry in resolved]
