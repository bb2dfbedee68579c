import argparse
import json
import os
import sys

import numpy as np
from tqdm import tqdm

from heatpose.config import get_model_config
from heatpose.inference import HeatmapDecoder, KeypointSet


def load_tensor(path: str, key: str | None = None) -> np.ndarray:
    """Load a confidence tensor from .npy/.npz; a 4-D batch yields batch 0."""

    data = np.load(path)
    if isinstance(data, np.lib.npyio.NpzFile):
        with data:
            names = list(data.files)
            if not names:
                raise ValueError(f"{path}: npz archive is empty")
            name = key or names[0]
            if name not in names:
                raise ValueError(f"{path}: no array named {name!r} (have {names})")
            arr = data[name]
    else:
        arr = data

    if arr.ndim == 4:
        arr = arr[0]
    return arr


def keypoints_to_record(source: str, keypoints: KeypointSet, labels=None) -> dict:
    names = list(labels) if labels and len(labels) == len(keypoints) else None
    points = []
    for i, kp in enumerate(keypoints):
        entry = {"index": i, "label": names[i] if names else None}
        if kp is None:
            entry.update({"x": None, "y": None, "confidence": None})
        else:
            entry.update({"x": kp.x, "y": kp.y, "confidence": kp.confidence})
        points.append(entry)
    return {"source": source, "num_keypoints": len(keypoints), "keypoints": points}


def _build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Decode pose heatmap tensors (.npy/.npz) to keypoints.")
    p.add_argument("inputs", nargs="+", help="Tensor files of shape (rows, cols, channels)")
    p.add_argument(
        "--model",
        default=None,
        choices=["pefm", "posenet"],
        help="Model config used to label channels",
    )
    p.add_argument("--key", default=None, help="Array name inside .npz archives")
    p.add_argument(
        "--filter-non-positive",
        action="store_true",
        help="Ignore scores <= 0 when searching for each channel's maximum",
    )
    p.add_argument("--out", default=None, help="Write JSON lines here instead of stdout")
    return p


def main(argv: list[str] | None = None) -> int:
    args = _build_argparser().parse_args(argv)

    labels = get_model_config(args.model).keypoint_labels if args.model else None
    decoder = HeatmapDecoder(filter_non_positive=args.filter_non_positive)

    records = []
    failed = 0
    for path in tqdm(args.inputs, desc="Decoding", disable=args.out is None):
        if not os.path.exists(path):
            print(f"Error: Tensor file not found: {path}", file=sys.stderr)
            failed += 1
            continue
        try:
            tensor = load_tensor(path, args.key)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            failed += 1
            continue
        records.append(keypoints_to_record(path, decoder.decode(tensor), labels))

    if args.out:
        if os.path.dirname(args.out):
            os.makedirs(os.path.dirname(args.out), exist_ok=True)
        with open(args.out, "w") as f:
            for rec in records:
                f.write(json.dumps(rec) + "\n")
        print(f"[SAVED] {args.out} ({len(records)} tensors)")
    else:
        for rec in records:
            print(json.dumps(rec))

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
