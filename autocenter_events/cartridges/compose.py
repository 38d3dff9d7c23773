"""Composer cartridge — builds the push message for the work item."""

from __future__ import annotations

from autocenter_events.pipeline import Dispatch, PipelineContext


class ComposerCartridge:
    name = "compose"

    async def process(self, dispatch: Dispatch, context: PipelineContext) -> Dispatch | None:
        if dispatch.snapshot is None:
            return None
        dispatch.message = dispatch.category.compose(dispatch.snapshot)
        return dispatch
