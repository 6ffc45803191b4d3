"""Entry point: load a stored run or raw-frame JSON, compute metrics and quality, print or export."""
import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path

from forceplate import DEFAULT_CONFIG, TestType, run_analysis
from forceplate.config import RFD_ANCHORS


def main() -> None:
    parser = argparse.ArgumentParser(description="Force Plate Analysis")
    parser.add_argument(
        "file",
        help="Path to a run JSON (samples, raw frames, or left/right force arrays)",
    )
    parser.add_argument(
        "--test-type",
        type=str,
        default=None,
        metavar="CODE",
        help="Override the test type in the file (CMJ, SJ, DJ, IMTP, IS, SB, SLB, DB)",
    )
    parser.add_argument(
        "--filter",
        type=float,
        default=None,
        metavar="HZ",
        help="Low-pass filter cutoff in Hz before detection (e.g. 50 or 100)",
    )
    parser.add_argument(
        "--body-weight",
        type=float,
        default=None,
        metavar="N",
        help="Body weight in N (default: mean of the quiet window)",
    )
    parser.add_argument(
        "--flight-threshold",
        type=float,
        default=DEFAULT_CONFIG.flight_force_threshold_n,
        metavar="N",
        help="Flight force threshold in N (default: %(default)s)",
    )
    parser.add_argument(
        "--take-off-consecutive",
        type=int,
        default=DEFAULT_CONFIG.take_off_consecutive_samples,
        metavar="N",
        help="Samples force must stay below threshold for take-off (default: %(default)s)",
    )
    parser.add_argument(
        "--landing-sustain-ms",
        type=float,
        default=DEFAULT_CONFIG.landing_sustain_ms,
        metavar="MS",
        help="Landing sustained contact duration in ms (default: %(default)s)",
    )
    parser.add_argument(
        "--onset-below-bw",
        type=float,
        default=DEFAULT_CONFIG.onset_below_bw,
        metavar="FRAC",
        help="Movement onset fallback tolerance as a fraction of BW (default: %(default)s)",
    )
    parser.add_argument(
        "--onset-n-sigma",
        type=float,
        default=DEFAULT_CONFIG.onset_n_sigma,
        metavar="N",
        help="Movement onset tolerance in quiet-standing std devs (default: %(default)s)",
    )
    parser.add_argument(
        "--onset-sustain-ms",
        type=float,
        default=DEFAULT_CONFIG.onset_sustain_ms,
        metavar="MS",
        help="Movement onset sustained duration in ms (default: %(default)s)",
    )
    parser.add_argument(
        "--rfd-anchor",
        choices=RFD_ANCHORS,
        default=DEFAULT_CONFIG.rfd_anchor,
        help="Start of the jump RFD window (default: %(default)s)",
    )
    parser.add_argument(
        "--export",
        type=str,
        default=None,
        metavar="PATH",
        help="Write the analysis payload JSON to PATH",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    path = Path(args.file)
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if args.test_type:
        data["test_type"] = TestType.from_value(args.test_type).value

    config = replace(
        DEFAULT_CONFIG,
        body_weight_n=args.body_weight,
        lowpass_cutoff_hz=args.filter,
        flight_force_threshold_n=args.flight_threshold,
        take_off_consecutive_samples=args.take_off_consecutive,
        landing_sustain_ms=args.landing_sustain_ms,
        onset_below_bw=args.onset_below_bw,
        onset_n_sigma=args.onset_n_sigma,
        onset_sustain_ms=args.onset_sustain_ms,
        rfd_anchor=args.rfd_anchor,
    )
    try:
        payload = run_analysis(data, config=config)
    except ValueError as exc:
        raise SystemExit(f"Analysis failed: {exc}")

    print(f"Athlete: {payload['athlete_id']}  Test: {payload['test_type']}")
    print(f"Bodyweight: {payload['bodyweight_N']:.1f} N  Sample rate: {payload['sample_rate']:.1f} Hz")
    if payload["validity"] is not None and not payload["validity"]["is_valid"]:
        print(f"Validity flags: {payload['validity']['flags']}")
    if payload["phases"]:
        print("Phases:")
        for p in payload["phases"]:
            print(f"  {p['name']}: {p['start_ms']} ms -> {p['end_ms']} ms")
    print("Metrics:")
    for key, entry in sorted(payload["analysis"].items()):
        print(f"  {key}: {entry['value']:.4f} {entry['unit']}")
    print(f"Quality: {payload['quality_score']:.0f} ({payload['quality_band']})")
    for d in payload["quality_deductions"]:
        print(f"  -{d['points']:.0f} {d['reason']}")

    if args.export:
        out = Path(args.export)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        print(f"Exported analysis JSON to {args.export}")


if __name__ == "__main__":
    main()
