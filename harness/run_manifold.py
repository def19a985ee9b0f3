#!/usr/bin/env python3
"""
Emotion-manifold report runner.

Features:
- Builds EmotionalParameters from flags (defaults: the application's start-up values),
  or draws them with --random/--seed
- Evaluates emotions, dominant emotion with severity, and the statistics snapshot
  at (EP, P)
- Optionally traces a geodesic (--geodesic x0 y0 x1 y1) and parallel-transports e_x
  along it (--transport)
- Optionally samples the surface mesh (--resolution) and Christoffel glyph grid
- Prints a JSON report on stdout and logs headline metrics, plus the transported
  vector norm at sampled segments (step = segment index)

Example:
    python harness/run_manifold.py --EP 0.2 --P 0.8 --geodesic -0.5 -0.5 0.5 0.5 --transport
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

# Ensure imports resolve when running as a script
THIS_DIR = os.path.dirname(__file__)
PKG_ROOT = os.path.abspath(os.path.join(THIS_DIR, ".."))
if PKG_ROOT not in sys.path:
    sys.path.insert(0, PKG_ROOT)

from emotion_manifold import EmotionalManifold, EmotionalParameters, ManifoldConfig, random_parameters
from emotion_manifold.utils.logging import get_logger, log_metric, log_metrics


def _to_native(obj: Any) -> Any:
    """
    Recursively convert numpy arrays/scalars into Python lists/ints/floats/bools/str.
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, dict):
        return {str(k): _to_native(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_native(v) for v in obj]
    tolist = getattr(obj, "tolist", None)
    if callable(tolist):
        return _to_native(tolist())
    return str(obj)


def _params_from_args(args: argparse.Namespace) -> EmotionalParameters:
    if args.random:
        return random_parameters(np.random.default_rng(args.seed))
    d = EmotionalParameters.default()
    return EmotionalParameters(
        EP=d.EP if args.EP is None else args.EP,
        P=d.P if args.P is None else args.P,
        V=d.V if args.V is None else args.V,
        SC=d.SC if args.SC is None else args.SC,
        Acc=d.Acc if args.Acc is None else args.Acc,
        W_p=d.W_p if args.W_p is None else args.W_p,
        T=d.T if args.T is None else args.T,
    )


def build_report(
    manifold: EmotionalManifold,
    params: EmotionalParameters,
    geodesic: Optional[Sequence[float]] = None,
    steps: Optional[int] = None,
    transport: bool = False,
    resolution: Optional[int] = None,
    workers: int = 1,
) -> Dict[str, Any]:
    """Assemble the JSON-serializable report for one parameter set."""
    if transport and geodesic is None:
        raise ValueError("--transport requires --geodesic")

    emotions = manifold.all_emotions(params.EP, params.P, params)
    stats = manifold.stats(params)
    report: Dict[str, Any] = {
        "params": {k: getattr(params, k) for k in ("EP", "P", "V", "SC", "Acc", "W_p", "T")},
        "emotions": emotions.as_dict(),
        "height": manifold.height(params.EP, params.P, params),
        "stats": stats.as_dict(),
    }

    if geodesic is not None:
        x0, y0, x1, y1 = (float(v) for v in geodesic)
        path = manifold.geodesic((x0, y0), (x1, y1), params, steps)
        report["geodesic"] = {
            "points": int(path.shape[0]),
            "start": path[0],
            "end": path[-1],
        }
        if transport:
            carried = manifold.parallel_transport((1.0, 0.0), path, params)
            final = carried[-1].vector if carried else None
            report["transport"] = {
                "entries": len(carried),
                "final_vector": None if final is None else [final.x, final.y],
                "final_norm": None if final is None else final.norm(),
                "norms": [tv.vector.norm() for tv in carried],
            }

    if resolution is not None:
        surface = manifold.sample_surface(params, resolution)
        glyphs = manifold.sample_christoffel(params, workers=workers)
        kinds, counts = np.unique(surface.dominant.astype(str), return_counts=True)
        report["surface"] = {
            "vertices": int(surface.Z.size),
            "z_min": float(surface.Z.min()),
            "z_max": float(surface.Z.max()),
            "dominant_counts": {str(k): int(c) for k, c in zip(kinds, counts)},
            "christoffel_max": float(glyphs.magnitude.max()),
        }

    if manifold.cache is not None:
        report["cache"] = {"entries": len(manifold.cache), "hits": manifold.cache.hits, "misses": manifold.cache.misses}
    return _to_native(report)


def log_path_metrics(report: Dict[str, Any], logger=None, samples: int = 10) -> None:
    """
    Log the geodesic point count and the transported-vector norm along the path.

    Norms are logged at about `samples` evenly spaced segments plus the last
    one, each tagged with its segment index as `step`.
    """
    geo = report.get("geodesic")
    if geo is None:
        return
    log_metric("geodesic_points", geo["points"], logger=logger)
    transport = report.get("transport")
    if not transport or not transport["norms"]:
        return
    norms = transport["norms"]
    stride = max(1, len(norms) // samples)
    picked = list(range(0, len(norms), stride))
    if picked[-1] != len(norms) - 1:
        picked.append(len(norms) - 1)
    for k in picked:
        log_metric("transport_norm", norms[k], step=k, logger=logger)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Emotion manifold: point statistics, geodesics and transport")
    for name, help_text in (
        ("EP", "Expectation in [-1, 1]"),
        ("P", "Perception in [-1, 1]"),
        ("V", "Attachment power in [0, 1]"),
        ("SC", "Source confidence in [0, 1]"),
        ("Acc", "Acceptance in [0, 1]"),
        ("W_p", "Perspective weight in [0, 1]"),
        ("T", "Elapsed time >= 0"),
    ):
        parser.add_argument(f"--{name}", type=float, default=None, help=help_text)
    parser.add_argument("--random", action="store_true", help="Draw random parameters (T=0)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for --random")
    parser.add_argument("--geodesic", type=float, nargs=4, metavar=("X0", "Y0", "X1", "Y1"), help="Trace a geodesic")
    parser.add_argument("--steps", type=int, default=None, help="Geodesic steps (default from config)")
    parser.add_argument("--transport", action="store_true", help="Parallel-transport e_x along the geodesic")
    parser.add_argument("--resolution", type=int, default=None, help="Sample the surface mesh at this resolution")
    parser.add_argument("--workers", type=int, default=1, help="Threads for grid sampling")
    parser.add_argument("--quiet", action="store_true", help="Skip metric logging")
    args = parser.parse_args(argv)

    if args.transport and args.geodesic is None:
        parser.error("--transport requires --geodesic")

    params = _params_from_args(args)
    manifold = EmotionalManifold(ManifoldConfig())
    report = build_report(
        manifold,
        params,
        geodesic=args.geodesic,
        steps=args.steps,
        transport=args.transport,
        resolution=args.resolution,
        workers=args.workers,
    )
    print(json.dumps(report, indent=2, sort_keys=True))

    if not args.quiet:
        logger = get_logger()
        stats = report["stats"]
        log_metrics(
            {
                "height": report["height"],
                "gaussian_curvature": stats["gaussian_curvature"],
                "connection_curvature": stats["connection_curvature"],
                "energy": stats["energy"],
            },
            logger=logger,
        )
        log_path_metrics(report, logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())
