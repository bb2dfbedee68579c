import argparse
import os
import time

import cv2
from tqdm import tqdm

from heatpose.config import StreamConfig, get_model_config
from heatpose.inference import DetectorError, HeatmapDecoder, ONNXDetector
from heatpose.utils import draw_keypoints, format_keypoint_rows


def _build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run an ONNX pose heatmap model on images.")
    p.add_argument("images", nargs="+", help="Input image paths")
    p.add_argument("--model", required=True, help="Path to the ONNX pose model")
    p.add_argument("--config", default="pefm", choices=["pefm", "posenet"])
    p.add_argument("--float-input", action="store_true", help="Feed raw [0, 255] pixels")
    p.add_argument(
        "--keep-non-positive",
        action="store_true",
        help="Consider scores <= 0 when picking each keypoint",
    )
    p.add_argument("--min-conf", type=float, default=None, help="Hide keypoints below this score")
    p.add_argument("--out-dir", default="pred_result")
    p.add_argument("--verbose", action="store_true", help="Print per-keypoint listings")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_argparser().parse_args(argv)

    if not os.path.exists(args.model):
        print(f"Error: Model file not found: {args.model}")
        return 1

    cfg = get_model_config(args.config)
    stream_cfg = StreamConfig(
        filter_non_positive=not args.keep_non_positive,
        is_quantized=not args.float_input,
    )
    detector = ONNXDetector(args.model, cfg, is_quantized=stream_cfg.is_quantized)
    decoder = HeatmapDecoder(filter_non_positive=stream_cfg.filter_non_positive)

    os.makedirs(args.out_dir, exist_ok=True)
    t_decode = 0.0
    start_time = time.perf_counter()

    for path in tqdm(args.images, desc="Pose estimation"):
        frame = cv2.imread(path)
        try:
            tensor = detector.detect_frame(frame)
        except DetectorError as e:
            print(f"[WARN] {path}: {e}")
            continue

        t0 = time.perf_counter()
        keypoints = decoder.decode(tensor)
        t_decode += time.perf_counter() - t0

        if args.verbose:
            print(f"\n{path}")
            for label, loc, conf in format_keypoint_rows(keypoints, cfg.keypoint_labels):
                print(f"  {label:<16} {loc:<18} {conf}")

        vis = draw_keypoints(
            frame, keypoints, skeleton=cfg.skeleton, min_confidence=args.min_conf
        )
        out_path = os.path.join(args.out_dir, os.path.basename(path))
        cv2.imwrite(out_path, vis)

    duration = time.perf_counter() - start_time
    n = len(args.images)
    print(f"\n[INFO] Processed {n} images in {duration:.3f}s ({n / max(1e-6, duration):.2f} img/s)")

    print("\n=== Timing ===")
    s = detector.stats
    print(f"[Detector] calls={s['calls']} outputs={s['outputs']}")
    print(f"  preprocess: {s['t_preprocess']:.3f}s")
    print(f"  forward:    {s['t_forward']:.3f}s")
    print(f"  post:       {s['t_post']:.3f}s")
    print(f"  decode:     {t_decode:.3f}s")
    print(f"\n[SAVED] {args.out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
