"""
Experiment runner: raw vs framed payloads for the restricted-alphabet Huffman codec

Runs repeated compress/decompress cycles over synthetic text and records size,
timing and correctness. The raw format has no bit count, so its padding bits can
decode into extra trailing symbols; the "spurious_symbols" column counts them.

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_size_kb 64 --exp2_max_kb 512
  python experiments.py --outdir results --exp1_generators english_like,digits_heavy
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import string
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import matplotlib.pyplot as plt

from codec import PayloadFormat, decode_payload, encode_payload
from huffman import (ALPHABET, build_huffman_tree, filter_and_fold, freq_table,
                     generate_huffman_codes, huffman_decode, huffman_encode)
from treecodec import deserialize_tree, serialize_tree

PIPELINES = (PayloadFormat.RAW.value, PayloadFormat.FRAMED.value)


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


# Synthetic dataset generators (all output stays inside ALPHABET, with some upper case)

def _weighted_text(size: int, chars: str, weights: List[float], seed: int) -> str:
    rng = random.Random(seed)
    return "".join(rng.choices(chars, weights=weights, k=size))

def gen_uniform(size: int, seed: int = 0) -> str:
    return _weighted_text(size, ALPHABET, [1.0] * len(ALPHABET), seed)

def gen_english_like(size: int, seed: int = 0) -> str:
    chars = " etaoinshrdlcumwfgypbvkjxqETAOIN\n.,"
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch in "\n.,":
            weights.append(1.2)
        elif ch.isupper():
            weights.append(0.6)
        elif ch in "etaoinshrdlu":
            weights.append(6.0)
        elif ch in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.0)
    return _weighted_text(size, chars, weights, seed)

def gen_digits_heavy(size: int, seed: int = 0) -> str:
    chars = string.digits + ".,\n "
    weights = [5.0] * 10 + [2.0, 2.0, 1.0, 1.0]
    return _weighted_text(size, chars, weights, seed)

def gen_repetitive(size: int, dominant: str = "e", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = [ch for ch in ALPHABET if ch != dominant]
    return "".join(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_single_symbol(size: int, seed: int = 0) -> str:
    return "a" * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform40": lambda size, seed: gen_uniform(size, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "digits_heavy": lambda size, seed: gen_digits_heavy(size, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dom_frac=0.90, seed=seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size, seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, str]:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise ValueError(f"unknown generator {name!r}, choose from {sorted(GENERATOR_REGISTRY)}")
    return name, fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    input_chars: int
    run_id: int
    pipeline: str  # "raw" or "framed"
    unique_symbols: int

    build_tree_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    payload_bytes: int
    tree_bytes: int
    pad_bits: int
    compression_ratio: float

    spurious_symbols: int
    correctness_ok: int  # 1 or 0


def run_one(text: str, pipeline: str) -> MetricRow:
    payload_format = PayloadFormat(pipeline)
    expected = filter_and_fold(text)
    ft = freq_table(text)

    # Tree + code table
    t0 = now_ns()
    tree = build_huffman_tree(ft)
    code_map = generate_huffman_codes(tree)
    tree_text = serialize_tree(tree)
    t1 = now_ns()
    build_tree_ms = ns_to_ms(t1 - t0)

    # encode
    t2 = now_ns()
    bits = huffman_encode(text, code_map)
    payload, pad_bits = encode_payload(bits, payload_format)
    t3 = now_ns()
    encode_ms = ns_to_ms(t3 - t2)

    # decode from the serialized tree, the way a separate decompressor would
    t4 = now_ns()
    decoded_tree = deserialize_tree(tree_text)
    decoded_bits = decode_payload(payload, payload_format)
    decoded = huffman_decode(decoded_bits, decoded_tree, strict=payload_format is PayloadFormat.FRAMED)
    t5 = now_ns()
    decode_ms = ns_to_ms(t5 - t4)

    correctness_ok = 1 if decoded == expected else 0
    spurious = len(decoded) - len(expected) if decoded.startswith(expected) else 0
    total_ms = build_tree_ms + encode_ms + decode_ms

    return MetricRow(
        exp_name="",
        dataset_name="",
        input_chars=len(expected),
        run_id=0,
        pipeline=pipeline,
        unique_symbols=len(ft),
        build_tree_ms=build_tree_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=total_ms,
        payload_bytes=len(payload),
        tree_bytes=len(tree_text),
        pad_bits=pad_bits,
        compression_ratio=(len(payload) + len(tree_text)) / max(1, len(expected)),
        spurious_symbols=spurious,
        correctness_ok=correctness_ok,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, input_chars, pipeline and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int, str], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.input_chars, r.pipeline)
        key_to.setdefault(key, []).append(r)

    averaged = ["compression_ratio", "encode_ms", "decode_ms", "build_tree_ms", "total_ms", "spurious_symbols"]
    summary_fields = ["exp_name", "dataset_name", "input_chars", "pipeline", "n_runs"]
    for name in averaged:
        summary_fields += [f"{name}_mean", f"{name}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size, pipeline = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "input_chars": size,
                "pipeline": pipeline,
                "n_runs": len(items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for name in averaged:
                m, s = mean_stdev([getattr(x, name) for x in items])
                row[f"{name}_mean"] = m
                row[f"{name}_stdev"] = s
            w.writerow(row)


# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, pipeline: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset and r.pipeline == pipeline]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    charts = [
        ("compression_ratio", "(Payload + Tree Bytes) / Input Chars", "Compression Ratio by Distribution",
         "exp1_compression_ratio.png"),
        ("encode_ms", "Encode Time (ms)", "Encode Time by Distribution", "exp1_encode_time.png"),
        ("correctness_ok", "Exact Round-Trip Rate", "Round-Trip Correctness by Distribution",
         "exp1_correctness.png"),
    ]
    for field, ylabel, title, filename in charts:
        plt.figure()
        for p in PIPELINES:
            y = [mean_for(d, p, field) for d in datasets]
            plt.plot(x, y, marker="o", label=p)
        plt.xticks(x, datasets, rotation=20, ha="right")
        plt.ylabel(ylabel)
        plt.title(f"Experiment 1: {title}")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / filename, dpi=200)
        plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    distributions = sorted(set(r.dataset_name for r in exp_rows))

    for dist in distributions:
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.input_chars for r in dist_rows))

        def mean_size(size: int, pipeline: str, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.input_chars == size and r.pipeline == pipeline]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for p in PIPELINES:
            y = [mean_size(s, p, "total_ms") for s in sizes]
            plt.plot(sizes, y, marker="o", label=p)
        plt.xlabel("Input Size (chars)")
        plt.ylabel("Total Time (ms) (build + encode + decode)")
        plt.title(f"Experiment 2: Total Runtime vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_total_time_{dist}.png", dpi=200)
        plt.close()

        plt.figure()
        for p in PIPELINES:
            y = [mean_size(s, p, "compression_ratio") for s in sizes]
            plt.plot(sizes, y, marker="o", label=p)
        plt.xscale("log", base=2)
        plt.xlabel("Input Size (chars)")
        plt.ylabel("(Payload + Tree Bytes) / Input Chars")
        plt.title(f"Experiment 2: Compression Ratio vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_compression_ratio_{dist}.png", dpi=200)
        plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def run_experiments(args: argparse.Namespace) -> List[MetricRow]:
    rows: List[MetricRow] = []

    def record(exp_name: str, dataset_name: str, run_id: int, text: str) -> None:
        for pipeline in PIPELINES:
            row = run_one(text, pipeline)
            row.exp_name = exp_name
            row.dataset_name = dataset_name
            row.run_id = run_id
            rows.append(row)

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            for run_id in range(1, args.runs + 1):
                dataset_name, text = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                record("exp1_distribution", dataset_name, run_id, text)

    # Experiment 2: size scaling (powers of 2)
    if not args.no_exp2:
        sizes: List[int] = []
        s = max(1, args.exp2_min_chars)
        while s <= max(1, args.exp2_max_kb) * 1024:
            sizes.append(s)
            s *= 2

        for gen_name in parse_csv_list(args.exp2_generators):
            for size in sizes:
                for run_id in range(1, args.runs + 1):
                    dataset_name, text = generate_dataset(gen_name, size, args.seed + 10_000 + size + run_id)
                    record("exp2_size_scaling", dataset_name, run_id, text)

    return rows

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Compare raw and framed payloads of the Huffman text codec")
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--no_plots", action="store_true", help="Write CSV files only")

    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")

    ap.add_argument("--exp1_size_kb", type=int, default=64, help="Experiment 1 fixed input size in K chars")
    ap.add_argument("--exp1_generators", type=str, default="uniform40,english_like,digits_heavy,repetitive90,single_symbol",
                    help="Comma-separated dataset generator names for experiment 1")

    ap.add_argument("--exp2_min_chars", type=int, default=1, help="Experiment 2 smallest input size in chars")
    ap.add_argument("--exp2_max_kb", type=int, default=256, help="Experiment 2 largest input size in K chars")
    ap.add_argument("--exp2_generators", type=str, default="english_like,uniform40",
                    help="Comma-separated dataset generator names for experiment 2")
    return ap

def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows = run_experiments(args)

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_experiment_1(rows, outdir)
        plot_experiment_2(rows, outdir)

    for pipeline in PIPELINES:
        sel = [r for r in rows if r.pipeline == pipeline]
        ok_rate = sum(r.correctness_ok for r in sel) / max(1, len(sel))
        print(f"{pipeline:>7}: exact round-trip rate {ok_rate:.3f} over {len(sel)} runs")
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
