"""Closed set of metric keys with units and explanations for API and report consumers.

The metrics map stays string-keyed on the wire; these keys are the only names the
engine writes. Windowed isometric keys (rfd0_100ms, impulse0_200ms, forceAt50ms)
are built with the helpers below.
"""
import re
from enum import Enum
from typing import Dict, Optional, Tuple


class MetricKey(str, Enum):
    # Basic, every category
    PEAK_FORCE = "peakForce"
    AVERAGE_FORCE = "averageForce"
    MIN_FORCE = "minForce"
    BODY_WEIGHT = "bodyWeight"
    RELATIVE_FORCE = "relativeForce"
    ASYMMETRY_INDEX = "asymmetryIndex"
    MAX_ASYMMETRY = "maxAsymmetry"
    LEFT_LOAD_PERCENTAGE = "leftLoadPercentage"
    RIGHT_LOAD_PERCENTAGE = "rightLoadPercentage"
    FORCE_COEFFICIENT_OF_VARIATION = "forceCoefficientOfVariation"
    SAMPLE_RATE = "sampleRate"
    TEST_DURATION = "testDuration"
    # Jump
    FLIGHT_TIME = "flightTime"
    JUMP_HEIGHT = "jumpHeight"
    TAKEOFF_VELOCITY = "takeoffVelocity"
    CONTACT_TIME = "contactTime"
    RFD = "rfd"
    NET_IMPULSE = "netImpulse"
    IMPULSE_BRAKING = "impulseBraking"
    IMPULSE_PROPULSION = "impulsePropulsion"
    PEAK_POWER = "peakPower"
    AVERAGE_POWER = "averagePower"
    RELATIVE_POWER = "relativePower"
    JUMP_HEIGHT_IMPULSE = "jumpHeightImpulse"
    UNLOADING_DURATION = "unloadingDuration"
    BRAKING_DURATION = "brakingDuration"
    PROPULSION_DURATION = "propulsionDuration"
    LANDING_PEAK_FORCE = "landingPeakForce"
    REACTIVE_STRENGTH_INDEX = "reactiveStrengthIndex"
    # Isometric
    TIME_TO_PEAK_FORCE = "timeToPeakForce"
    IMPULSE = "impulse"
    FORCE_ONSET_TIME = "forceOnsetTime"
    # Balance
    COP_RANGE_ML = "copRangeML"
    COP_RANGE_AP = "copRangeAP"
    COP_RANGE = "copRange"
    COP_PATH_LENGTH = "copPathLength"
    COP_VELOCITY = "copVelocity"
    COP_VELOCITY_ML = "copVelocityML"
    COP_VELOCITY_AP = "copVelocityAP"
    COP_AREA = "copArea"
    COP_ELLIPSE_AREA_95 = "copEllipseArea95"
    COP_STD_ML = "copStdML"
    COP_STD_AP = "copStdAP"
    STABILITY_INDEX = "stabilityIndex"

    @property
    def unit(self) -> str:
        return METRIC_INFO[self][0]

    @property
    def explanation(self) -> str:
        return METRIC_INFO[self][1]


METRIC_INFO: Dict[MetricKey, Tuple[str, str]] = {
    MetricKey.PEAK_FORCE: ("N", "Maximum total GRF (after onset for isometric tests)."),
    MetricKey.AVERAGE_FORCE: ("N", "Mean total GRF; braking and propulsion phases for jumps, whole recording otherwise."),
    MetricKey.MIN_FORCE: ("N", "Minimum total GRF over the whole recording."),
    MetricKey.BODY_WEIGHT: ("N", "Quiet-standing baseline used for phase detection."),
    MetricKey.RELATIVE_FORCE: ("ratio", "Peak force divided by body weight."),
    MetricKey.ASYMMETRY_INDEX: ("%", "Mean per-sample |L - R| / (L + R) over the analysis window."),
    MetricKey.MAX_ASYMMETRY: ("%", "Largest per-sample asymmetry in the analysis window."),
    MetricKey.LEFT_LOAD_PERCENTAGE: ("%", "Share of the load on the left platform."),
    MetricKey.RIGHT_LOAD_PERCENTAGE: ("%", "Share of the load on the right platform."),
    MetricKey.FORCE_COEFFICIENT_OF_VARIATION: ("ratio", "Std / mean of total GRF."),
    MetricKey.SAMPLE_RATE: ("Hz", "Effective sample rate from the timestamps."),
    MetricKey.TEST_DURATION: ("ms", "Time from first to last sample."),
    MetricKey.FLIGHT_TIME: ("ms", "Time airborne from take-off to landing."),
    MetricKey.JUMP_HEIGHT: ("cm", "Jump height from flight time, g * t^2 / 8."),
    MetricKey.TAKEOFF_VELOCITY: ("m/s", "Vertical velocity at take-off from flight time, g * t / 2."),
    MetricKey.CONTACT_TIME: ("ms", "Time from movement onset (first contact for drop jumps) to take-off."),
    MetricKey.RFD: ("N/s", "Rate of force development, dF/dt over the RFD window from the configured anchor (jumps) or onset to peak."),
    MetricKey.NET_IMPULSE: ("N·s", "Impulse of (F - BW) from onset to take-off (to the end for isometric tests)."),
    MetricKey.JUMP_HEIGHT_IMPULSE: ("cm", "Jump height from impulse-momentum, v^2 / 2g."),
    MetricKey.IMPULSE_BRAKING: ("N·s", "Impulse of (F - BW) over the braking phase."),
    MetricKey.IMPULSE_PROPULSION: ("N·s", "Impulse of (F - BW) over the propulsion phase."),
    MetricKey.PEAK_POWER: ("W", "Peak COM power, F * v, from onset to take-off."),
    MetricKey.AVERAGE_POWER: ("W", "Mean COM power over the propulsion phase."),
    MetricKey.RELATIVE_POWER: ("W/kg", "Peak power divided by body mass."),
    MetricKey.UNLOADING_DURATION: ("ms", "Duration from onset to the start of braking."),
    MetricKey.BRAKING_DURATION: ("ms", "Duration from the start of braking to zero COM velocity."),
    MetricKey.PROPULSION_DURATION: ("ms", "Duration from zero COM velocity to take-off."),
    MetricKey.LANDING_PEAK_FORCE: ("N", "Maximum total GRF after landing."),
    MetricKey.REACTIVE_STRENGTH_INDEX: ("m/s", "Drop jump height (m) divided by contact time (s)."),
    MetricKey.TIME_TO_PEAK_FORCE: ("ms", "Time from force onset to peak force."),
    MetricKey.IMPULSE: ("N·s", "Impulse of force above baseline from onset to the end of the recording."),
    MetricKey.FORCE_ONSET_TIME: ("ms", "Time of force onset from the first sample."),
    MetricKey.COP_RANGE_ML: ("mm", "Medial-lateral CoP excursion (max - min)."),
    MetricKey.COP_RANGE_AP: ("mm", "Anterior-posterior CoP excursion (max - min)."),
    MetricKey.COP_RANGE: ("mm", "Combined CoP excursion, sqrt(ML^2 + AP^2)."),
    MetricKey.COP_PATH_LENGTH: ("mm", "Total length of the CoP trajectory."),
    MetricKey.COP_VELOCITY: ("mm/s", "Mean CoP speed, path length / duration."),
    MetricKey.COP_VELOCITY_ML: ("mm/s", "Mean medial-lateral CoP speed."),
    MetricKey.COP_VELOCITY_AP: ("mm/s", "Mean anterior-posterior CoP speed."),
    MetricKey.COP_AREA: ("mm²", "Area of the convex hull of the CoP trajectory."),
    MetricKey.COP_ELLIPSE_AREA_95: ("mm²", "Area of the 95% confidence ellipse of the CoP."),
    MetricKey.COP_STD_ML: ("mm", "Standard deviation of medial-lateral CoP."),
    MetricKey.COP_STD_AP: ("mm", "Standard deviation of anterior-posterior CoP."),
    MetricKey.STABILITY_INDEX: ("score", "100 / (1 + variance of CoP step lengths); higher is steadier."),
}

_WINDOWED = {
    "rfd0_": ("N/s", "Rate of force development from onset to {w} ms."),
    "impulse0_": ("N·s", "Impulse of force above baseline from onset to {w} ms."),
    "forceAt": ("N", "Total GRF {w} ms after onset."),
}
_WINDOWED_RE = re.compile(r"^(rfd0_|impulse0_|forceAt)(\d+(?:\.\d+)?)ms$")
_BY_VALUE = {member.value: member for member in MetricKey}


def _window_label(window_ms: float) -> str:
    return str(int(window_ms)) if float(window_ms).is_integer() else str(window_ms)


def rfd_window_key(window_ms: float) -> str:
    return f"rfd0_{_window_label(window_ms)}ms"


def impulse_window_key(window_ms: float) -> str:
    return f"impulse0_{_window_label(window_ms)}ms"


def force_at_key(window_ms: float) -> str:
    return f"forceAt{_window_label(window_ms)}ms"


def describe(key: str) -> Optional[Tuple[str, str]]:
    """(unit, explanation) for a fixed or windowed metric key; None if unknown."""
    if key in _BY_VALUE:
        return METRIC_INFO[_BY_VALUE[key]]
    match = _WINDOWED_RE.match(key)
    if match is None:
        return None
    unit, text = _WINDOWED[match.group(1)]
    return unit, text.format(w=match.group(2))


def is_known(key: str) -> bool:
    return describe(key) is not None
