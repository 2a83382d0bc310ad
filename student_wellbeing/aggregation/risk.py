"""
Cohort risk labels derived from a summary row's rounded means
"""

from typing import Optional

HIGH_RISK = 'High Risk'
ELEVATED_DEPRESSION = 'Elevated Depression'
LOW_SOCIAL_CONNECTION = 'Low Social Connection'
STANDARD = 'Standard'


def classify_risk_profile(mean_depression: Optional[float],
                          mean_connectedness: Optional[float],
                          depression_threshold: float = 7.0,
                          connectedness_threshold: float = 40.0) -> str:
    """
    Label a cohort by its mean PHQ-9 and SCS scores

    Depression above the threshold and connectedness below the threshold
    are both strict comparisons. A null mean never meets its condition.

    Args:
        mean_depression: Rounded mean PHQ-9 score
        mean_connectedness: Rounded mean SCS score
        depression_threshold: PHQ-9 mean above which depression is elevated
        connectedness_threshold: SCS mean below which connection is low

    Returns:
        One of 'High Risk', 'Elevated Depression', 'Low Social Connection', 'Standard'
    """
    elevated = mean_depression is not None and mean_depression > depression_threshold
    disconnected = mean_connectedness is not None and mean_connectedness < connectedness_threshold

    if elevated and disconnected:
        return HIGH_RISK
    if elevated:
        return ELEVATED_DEPRESSION
    if disconnected:
        return LOW_SOCIAL_CONNECTION
    return STANDARD
