"""Walkthrough: string, arithmetic, and allocation benchmarks.

Writes results to the console and to microbench_results.txt.
"""

from blkarbs_microbench import BenchmarkConfig, BenchmarkSuite, default_runtime_label

ONE_MILLION = 1_000_000


def main() -> None:
    with open("microbench_results.txt", "w") as results_file:
        config = BenchmarkConfig(
            ignore_overhead=False,
            report_memory=True,
            output_sink=results_file,
        )
        suite = BenchmarkSuite(config, default_runtime_label())

        with suite.group("String Operations:"):
            suite.member("Length Calculation", len, ONE_MILLION, "hello world")
            suite.member("Substring Generation", lambda s: s[:7], ONE_MILLION, "hello world")

        with suite.group("Integral Operations:"):
            suite.member("Multiplication", lambda: 1231083 * 1324081293 ** 2 // 23940 * 99999, ONE_MILLION * 10)

        def dead_dicts() -> None:
            for _ in range(ONE_MILLION):
                _ = {}

        suite.benchmark("Dict Operations:", lambda: suite.member("1M Dead Dict Test", dead_dicts, 10))


if __name__ == "__main__":
    main()
