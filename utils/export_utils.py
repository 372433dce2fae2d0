import csv
import html
import json
import os
import re
from datetime import datetime

from models import make_json_serializable
from utils.data_insights import DataInsights

EXPORT_FORMATS = ('json', 'csv', 'html', 'txt')


class ExportUtils:
    """Utility class for exporting analysis reports in various formats"""

    def __init__(self, export_dir="exports"):
        self.export_dir = export_dir
        os.makedirs(self.export_dir, exist_ok=True)

    def export(self, report, format_type, name, category=None):
        """Export a report dict in the given format and return the file path"""
        format_type = format_type.lower()
        if format_type not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {format_type}")

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        safe_name = re.sub(r'[^A-Za-z0-9_.-]+', '_', name).strip('_') or 'report'
        filepath = os.path.join(self.export_dir, f"{safe_name}_{timestamp}.{format_type}")

        if format_type == 'json':
            self._export_json(report, filepath)
        elif format_type == 'csv':
            self._export_csv(report, filepath)
        elif format_type == 'html':
            self._write(filepath, self._generate_html_report(report, name, category))
        else:
            self._write(filepath, self._generate_text_report(report, name, category))

        return filepath

    def _write(self, filepath, content):
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(content)

    def _export_json(self, report, filepath):
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(make_json_serializable(report), f, indent=2, ensure_ascii=False)

    def _export_csv(self, report, filepath):
        """One row per column profile, correlation, time bucket and group"""
        rows = self._flatten_report(report)
        fieldnames = ['section', 'name', 'kind', 'metric', 'value']

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(rows)

    def _flatten_report(self, report):
        flattened = []

        for column, profile in report.get('columns', {}).items():
            kind = profile.get('kind', '')
            if profile.get('stats'):
                for metric, value in profile['stats'].items():
                    flattened.append({'section': 'column', 'name': column, 'kind': kind,
                                      'metric': metric, 'value': value})
            for entry in profile.get('distribution', []):
                flattened.append({'section': 'column', 'name': column, 'kind': kind,
                                  'metric': f"count:{entry['value']}", 'value': entry['count']})
            if profile.get('dateRange'):
                for metric, value in profile['dateRange'].items():
                    flattened.append({'section': 'column', 'name': column, 'kind': kind,
                                      'metric': metric, 'value': value})

        for pair, value in report.get('correlations', {}).items():
            flattened.append({'section': 'correlation', 'name': pair, 'kind': '',
                              'metric': 'pearson', 'value': value})

        for column, series in report.get('timeSeries', {}).items():
            for bucket in series.get('data', []):
                flattened.append({'section': 'time_series', 'name': column,
                                  'kind': series.get('bucketGranularity', ''),
                                  'metric': bucket['time'], 'value': bucket['value']})

        for column, trend in report.get('trends', {}).items():
            for metric in ('slope', 'intercept', 'r2'):
                flattened.append({'section': 'trend', 'name': column, 'kind': '',
                                  'metric': metric, 'value': trend.get(metric)})

        grouping = report.get('grouping')
        if grouping:
            for group in grouping.get('totals', []):
                flattened.append({'section': 'grouping', 'name': grouping['key'],
                                  'kind': grouping.get('aggregation', 'sum'),
                                  'metric': group['key'], 'value': group['total']})

        return flattened

    def _generate_html_report(self, report, name, category=None):
        """Generate HTML report"""
        title = html.escape(name)
        content = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Data Analysis Report - {title}</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 20px; line-height: 1.6; }}
        .header {{ background-color: #f4f4f4; padding: 20px; border-radius: 5px; margin-bottom: 20px; }}
        .section {{ margin-bottom: 30px; }}
        table {{ border-collapse: collapse; width: 100%; margin-bottom: 20px; }}
        th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
        th {{ background-color: #f2f2f2; }}
        .warning {{ background-color: #fff3cd; border-left: 4px solid #ffc107; padding: 10px; }}
    </style>
</head>
<body>
    <div class="header">
        <h1>Data Analysis Report</h1>
        <p><strong>File:</strong> {title}</p>
        <p><strong>Rows:</strong> {report.get('rowCount', 0)}</p>
        <p><strong>Generated:</strong> {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}</p>
    </div>
"""

        content += """
    <div class="section">
        <h2>Columns</h2>
        <table>
            <tr><th>Column</th><th>Kind</th><th>Mean</th><th>Median</th><th>Std</th><th>Min</th><th>Max</th><th>Top value</th></tr>
"""
        for column, profile in report.get('columns', {}).items():
            stats = profile.get('stats') or {}
            distribution = profile.get('distribution') or []
            top_value = distribution[0]['value'] if distribution else ''
            cells = [column, profile.get('kind', '')]
            cells += [self._fmt(stats.get(metric)) for metric in ('mean', 'median', 'std', 'min', 'max')]
            cells.append(top_value)
            content += "            <tr>" + "".join(f"<td>{html.escape(str(cell))}</td>" for cell in cells) + "</tr>\n"
        content += """        </table>
    </div>
"""

        insights = DataInsights.generate(report, category)
        if insights:
            content += """
    <div class="section">
        <h2>Insights</h2>
        <ul>
"""
            for insight in insights:
                content += f"            <li>{html.escape(insight)}</li>\n"
            content += """        </ul>
    </div>
"""

        for warning in report.get('warnings', []):
            content += f'    <div class="warning">{html.escape(warning)}</div>\n'

        content += """
</body>
</html>
"""
        return content

    def _generate_text_report(self, report, name, category=None):
        """Generate plain text report"""
        text = f"""DATA ANALYSIS REPORT
{'=' * 50}

File: {name}
Rows: {report.get('rowCount', 0)}
Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

COLUMNS
{'-' * 30}
"""
        text += f"{'Column':<20} {'Kind':<12} {'Mean':<12} {'Median':<12} {'Std':<12}\n"
        text += f"{'-' * 70}\n"
        for column, profile in report.get('columns', {}).items():
            stats = profile.get('stats') or {}
            text += f"{column:<20} {profile.get('kind', ''):<12} "
            text += f"{self._fmt(stats.get('mean')):<12} {self._fmt(stats.get('median')):<12} "
            text += f"{self._fmt(stats.get('std')):<12}\n"

        text += f"\nINSIGHTS\n{'-' * 30}\n"
        for insight in DataInsights.generate(report, category):
            text += f"- {insight}\n"

        if report.get('warnings'):
            text += f"\nWARNINGS\n{'-' * 30}\n"
            for warning in report['warnings']:
                text += f"- {warning}\n"

        return text

    @staticmethod
    def _fmt(value):
        if value is None:
            return ''
        if isinstance(value, float):
            return f"{value:.2f}"
        return str(value)
