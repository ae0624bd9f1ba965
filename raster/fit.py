"""
Content-fit size calculation.
"""

import logging
from typing import Any

from core.constants import ErrorMessages
from core.enums import FitPolicy
from core.exceptions import AllocationFailedException, UnsupportedFitPolicyException
from core.utils.enum_converter import require_enum
from schemas.common import Size

logger = logging.getLogger(__name__)


class FitCalculator:
    """Aspect-preserving output sizes for the fill and fit policies."""

    SUPPORTED_POLICIES = (FitPolicy.FILL, FitPolicy.FIT)

    @staticmethod
    def parse_policy(policy: Any) -> FitPolicy:
        """
        Raises:
            UnsupportedFitPolicyException: If policy is not fill or fit
        """
        try:
            parsed = require_enum(policy, FitPolicy, normalize=True)
        except ValueError as e:
            logger.warning(f"Rejected fit policy {policy!r}")
            raise UnsupportedFitPolicyException(policy) from e

        if parsed not in FitCalculator.SUPPORTED_POLICIES:
            logger.warning(f"Rejected fit policy {parsed.value!r}")
            raise UnsupportedFitPolicyException(parsed.value)
        return parsed

    @staticmethod
    def ratio(source: Size, bounds: Size, policy: Any) -> float:
        """
        Uniform scale ratio that fills or fits source into bounds.

        Args:
            source: Source size (as displayed)
            bounds: Target bounds
            policy: FitPolicy.FILL or FitPolicy.FIT

        Returns:
            Scale ratio applied to both axes

        Raises:
            UnsupportedFitPolicyException: If policy is not fill or fit
            AllocationFailedException: If source has a zero dimension
        """
        policy = FitCalculator.parse_policy(policy)

        if source.width <= 0 or source.height <= 0:
            raise AllocationFailedException(
                ErrorMessages.INVALID_DIMENSIONS.format(width=source.width, height=source.height)
            )

        horizontal_ratio = bounds.width / source.width
        vertical_ratio = bounds.height / source.height

        if policy == FitPolicy.FILL:
            return max(horizontal_ratio, vertical_ratio)
        return min(horizontal_ratio, vertical_ratio)

    @staticmethod
    def calculate(source: Size, bounds: Size, policy: Any) -> Size:
        """
        Output size for source scaled by the policy's ratio.

        Example:
            >>> FitCalculator.calculate(Size(width=400, height=200), Size(width=100, height=100), "fill")
            >>> # Returns Size(width=200, height=100)
        """
        ratio = FitCalculator.ratio(source, bounds, policy)
        result = source.scaled(ratio)
        logger.debug(
            f"Fit {source.width:g}x{source.height:g} into {bounds.width:g}x{bounds.height:g} "
            f"({policy}): ratio={ratio:g} -> {result.width:g}x{result.height:g}"
        )
        return result
