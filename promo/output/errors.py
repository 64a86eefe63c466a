"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from promo.core.errors import ErrorCode
from promo.output.console import Style
from promo.promotion.errors import PromotionError

if TYPE_CHECKING:
    from promo.output.console import ConsoleProtocol

__all__ = ["print_promotion_error", "promotion_error_exit_code"]


def print_promotion_error(error: PromotionError, console: ConsoleProtocol) -> None:
    """Print a workflow error, the failed step and the hint."""
    console.error(error.message)
    if error.step and error.kind != "merge_conflict":
        console.print(f"step: {error.step}", Style.DIM)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def promotion_error_exit_code(error: PromotionError) -> int:
    """Get exit code for a workflow error."""
    match error.kind:
        case "merge_conflict":
            return int(ErrorCode.CONFLICT)
        case "git_failed":
            return int(ErrorCode.GIT_ERROR)
        case "config_invalid":
            return int(ErrorCode.ENV_ERROR)
        case "copy_failed" | "write_failed":
            return int(ErrorCode.IO_ERROR)
    # validation kinds
    return int(ErrorCode.USER_ERROR)
