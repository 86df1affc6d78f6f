"""
Stack output utilities.

Reads the deployed values of a stack's outputs from state and writes them
to a dotenv file for local development.

Dependencies: python-dotenv
"""

import logging
from pathlib import Path
from typing import Any

from dotenv import set_key

from reconciler.core.references import resolve_references
from reconciler.models import StateSnapshot

logger = logging.getLogger(__name__)


def resolve_outputs(outputs: dict[str, Any], snapshot: StateSnapshot) -> dict[str, Any]:
    """
    Resolve output references against deployed state.

    Outputs whose target is not deployed resolve to None.

    Args:
        outputs: Output name -> Ref / Fn::GetAtt intrinsic
        snapshot: Current deployed state

    Returns:
        dict: Output name -> deployed value
    """
    def lookup(logical_id: str, attribute: str | None) -> Any:
        deployed = snapshot.get(logical_id)
        if deployed is None:
            return None
        if attribute is None:
            return deployed.physical_id
        return deployed.outputs.get(attribute)

    return {name: resolve_references(value, lookup) for name, value in outputs.items()}


def write_outputs_to_env(outputs: dict[str, Any], path: str | Path) -> Path:
    """
    Write resolved outputs as UPPER_CASE dotenv entries.

    Other entries already in the file are kept; matching keys are updated.

    Args:
        outputs: Output name -> value (None values are skipped)
        path: Target file

    Returns:
        Path: File written
    """
    target = Path(path)
    target.touch(exist_ok=True)
    written = 0
    for name, value in outputs.items():
        if value is None:
            continue
        set_key(target, name.upper(), str(value), quote_mode="never")
        written += 1
    logger.info(f"{__name__}:write_outputs_to_env - Wrote {written} outputs to {target}")
    return target
