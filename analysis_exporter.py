import argparse
import json
import logging
import os

from analyzers.analysis_engine import AnalysisConfig, AnalysisEngine
from analyzers.dataset import Dataset
from models import make_json_serializable
from parsers.file_parser import FileParserFactory
from utils.data_insights import DataInsights


class AnalysisExporter:
    """Runs the analysis over local files without the web app"""

    def __init__(self, config=None):
        self.engine = AnalysisEngine(config or AnalysisConfig())
        self.file_parser = FileParserFactory()

    def analyze_file(self, file_path, overrides=None, aggregation='sum', category=None):
        """
        Parse and analyze a single file.

        Returns the report dict with its insight sentences under 'insights'.
        """
        ext = file_path.rsplit('.', 1)[-1].lower()
        parser = self.file_parser.get_parser(ext)
        dataset = Dataset.from_dataframe(parser.parse(file_path))

        results = self.engine.analyze(dataset, overrides=overrides, aggregation=aggregation).to_dict()
        results['insights'] = DataInsights.generate(results, category)
        return results

    def run_full_analysis(self, files, overrides=None, aggregation='sum', category=None):
        """Analyze each file; keyed by file path"""
        results = {}
        for file_path in files:
            logging.info(f"Analyzing {file_path}")
            results[file_path] = self.analyze_file(file_path, overrides, aggregation, category)
        return results

    def export_to_json(self, files, output_file="analysis_results.json", overrides=None, aggregation='sum',
                       category=None):
        """
        Run analysis and save results to a JSON file
        """
        results = self.run_full_analysis(files, overrides, aggregation, category)

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(make_json_serializable(results), f, indent=4, ensure_ascii=False)

        return output_file

    def close(self):
        self.engine.shutdown()


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Analyze CSV/Excel files and write the reports as JSON")
    parser.add_argument('files', nargs='+', help="CSV, XLS or XLSX files to analyze")
    parser.add_argument('-o', '--output', default='analysis_results.json', help="Output JSON file")
    parser.add_argument('--key', help="Force the grouping key column")
    parser.add_argument('--measure', help="Force the measure column")
    parser.add_argument('--date', help="Force the primary date column")
    parser.add_argument('--aggregation', default='sum', help="Grouping aggregation (sum, mean, median, min, max, count)")
    parser.add_argument('--category', help="Business category for extra insights (retail, finance, healthcare, manufacturing, education)")
    parser.add_argument('--max-rows', type=int, default=int(os.environ.get('ANALYSIS_MAX_ROWS', 10000)))
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    overrides = {
        role: getattr(args, role)
        for role in ('key', 'measure', 'date')
        if getattr(args, role)
    }

    exporter = AnalysisExporter(AnalysisConfig(max_rows=args.max_rows))
    try:
        output = exporter.export_to_json(
            args.files, args.output, overrides, args.aggregation, args.category
        )
    finally:
        exporter.close()

    print(f"Analysis results saved to {output}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    raise SystemExit(main())
