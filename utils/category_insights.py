"""
Business-category insights.

Uploads carry a category (retail, finance, healthcare, manufacturing,
education). Each category looks up its own columns by keyword and turns the
stored column profiles of a report into KPI sentences. Everything here reads
the report dict only, so stored reports can be re-described without
re-running the analysis.
"""

import logging

from analyzers.report import CATEGORICAL, NUMERIC
from analyzers.role_detector import match_column

GENERAL = 'general'

FINANCE_REVENUE_KEYWORDS = ['revenue', 'sales', 'amount', 'income', 'transaction']
FINANCE_EXPENSE_KEYWORDS = ['expense', 'cost', 'spend', 'debit', 'withdrawal']

HEALTHCARE_ADMISSION_KEYWORDS = ['admission', 'visit', 'encounter']
HEALTHCARE_BED_KEYWORDS = ['bed', 'occupancy', 'room']
HEALTHCARE_DEPARTMENT_KEYWORDS = ['department', 'unit', 'ward']
HEALTHCARE_DISEASE_KEYWORDS = ['disease', 'diagnosis', 'condition', 'icd']
HEALTHCARE_OUTCOME_KEYWORDS = ['outcome', 'result', 'status']
SUCCESSFUL_OUTCOMES = {'success', 'recovered', 'discharged'}

MANUFACTURING_PRODUCTION_KEYWORDS = ['production', 'produce', 'output', 'volume', 'unit']
MANUFACTURING_DEFECT_KEYWORDS = ['defect', 'reject', 'scrap', 'quality']
MANUFACTURING_DOWNTIME_KEYWORDS = ['downtime', 'machine', 'maintenance']
MANUFACTURING_COST_KEYWORDS = ['cost', 'expense', 'spend']

EDUCATION_SCORE_KEYWORDS = ['score', 'marks', 'grade', 'result', 'performance']
EDUCATION_ATTENDANCE_KEYWORDS = ['attendance']
EDUCATION_COMPLETION_KEYWORDS = ['completion']
EDUCATION_SUBJECT_KEYWORDS = ['subject', 'course', 'class']
EDUCATION_STUDENT_KEYWORDS = ['student', 'learner', 'name']


def numeric_columns(report):
    """Numeric columns whose statistics were computed"""
    return [
        name for name, profile in report.get('columns', {}).items()
        if profile.get('kind') == NUMERIC and profile.get('stats')
    ]


def categorical_columns(report):
    return [
        name for name, profile in report.get('columns', {}).items()
        if profile.get('kind') == CATEGORICAL
    ]


def column_stats(report, column):
    return report['columns'][column]['stats']


def column_distribution(report, column):
    return report['columns'][column].get('distribution', [])


def retail_insights(report):
    kpis = report.get('kpis', {})
    if not kpis:
        return ["No sales measure found; retail KPIs unavailable"]

    insights = []
    total = kpis.get('total', 0.0)
    if 'totalProfit' in kpis and total:
        insights.append(f"Profit margin: {kpis['totalProfit'] / total * 100:.2f}% of {kpis['measure']}")

    grouping = report.get('grouping')
    if grouping and grouping.get('totals') and total:
        best = grouping['highPerformers'][0]
        share = best['total'] / total * 100
        insights.append(f"{best['key']} accounts for {share:.2f}% of total {grouping['measure']}")

    return insights


def finance_insights(report):
    numeric = numeric_columns(report)
    revenue_column = match_column(numeric, FINANCE_REVENUE_KEYWORDS)
    if revenue_column is None:
        return ["Revenue column not found; no finance KPIs generated"]

    revenue = column_stats(report, revenue_column)
    insights = [
        f"Total revenue ('{revenue_column}'): {revenue['sum']:,.2f} "
        f"(average {revenue['mean']:,.2f}, max {revenue['max']:,.2f})"
    ]

    expense_column = match_column(numeric, FINANCE_EXPENSE_KEYWORDS, exclude={revenue_column})
    if expense_column is None:
        insights.append("Only revenue data available; no expense analysis")
        return insights

    expenses = column_stats(report, expense_column)['sum']
    net_profit = revenue['sum'] - expenses
    insights.append(f"Total expenses ('{expense_column}'): {expenses:,.2f}")
    if revenue['sum']:
        insights.append(
            f"Net profit: {net_profit:,.2f} (net margin {net_profit / revenue['sum'] * 100:.2f}%)"
        )
    else:
        insights.append(f"Net profit: {net_profit:,.2f}")
    return insights


def healthcare_insights(report):
    numeric = numeric_columns(report)
    categorical = categorical_columns(report)
    insights = []

    admission_column = match_column(numeric, HEALTHCARE_ADMISSION_KEYWORDS)
    if admission_column:
        admissions = column_stats(report, admission_column)
        insights.append(
            f"Total admissions ('{admission_column}'): {admissions['sum']:,.0f} "
            f"(average {admissions['mean']:,.2f} per record)"
        )

    bed_column = match_column(numeric, HEALTHCARE_BED_KEYWORDS, exclude={admission_column})
    if bed_column:
        beds = column_stats(report, bed_column)
        insights.append(
            f"Bed occupancy ('{bed_column}'): average {beds['mean']:,.2f}, peak {beds['max']:,.2f}"
        )

    for keywords, label in ((HEALTHCARE_DEPARTMENT_KEYWORDS, 'department'),
                            (HEALTHCARE_DISEASE_KEYWORDS, 'diagnosis')):
        column = match_column(categorical, keywords)
        distribution = column_distribution(report, column) if column else []
        if distribution:
            top = distribution[0]
            insights.append(
                f"Most frequent {label} in '{column}': {top['value']} ({top['percentage']:.2f}% of records)"
            )

    outcome_column = match_column(categorical, HEALTHCARE_OUTCOME_KEYWORDS)
    distribution = column_distribution(report, outcome_column) if outcome_column else []
    total = sum(entry['count'] for entry in distribution)
    if total:
        successes = sum(
            entry['count'] for entry in distribution
            if str(entry['value']).strip().lower() in SUCCESSFUL_OUTCOMES
        )
        insights.append(f"Treatment success rate ('{outcome_column}'): {successes / total * 100:.2f}%")

    if not insights:
        insights.append("No healthcare columns (admissions, occupancy, diagnosis, outcome) found")
    return insights


def manufacturing_insights(report):
    numeric = numeric_columns(report)
    production_column = match_column(numeric, MANUFACTURING_PRODUCTION_KEYWORDS)
    if production_column is None:
        return ["No production column found"]

    production = column_stats(report, production_column)
    insights = [
        f"Total production ('{production_column}'): {production['sum']:,.2f} "
        f"(average {production['mean']:,.2f}, max {production['max']:,.2f})"
    ]

    used = {production_column}
    defect_column = match_column(numeric, MANUFACTURING_DEFECT_KEYWORDS, exclude=used)
    if defect_column and production['sum']:
        defects = column_stats(report, defect_column)['sum']
        insights.append(f"Defect rate ('{defect_column}'): {defects / production['sum'] * 100:.2f}%")
        used.add(defect_column)

    downtime_column = match_column(numeric, MANUFACTURING_DOWNTIME_KEYWORDS, exclude=used)
    if downtime_column:
        downtime = column_stats(report, downtime_column)
        insights.append(
            f"Total downtime ('{downtime_column}'): {downtime['sum']:,.2f} "
            f"(average {downtime['mean']:,.2f})"
        )
        used.add(downtime_column)

    cost_column = match_column(numeric, MANUFACTURING_COST_KEYWORDS, exclude=used)
    if cost_column and production['sum']:
        cost = column_stats(report, cost_column)['sum']
        insights.append(f"Cost per unit produced: {cost / production['sum']:,.2f}")

    return insights


def education_insights(report):
    numeric = numeric_columns(report)
    categorical = categorical_columns(report)
    insights = []

    attendance_column = match_column(numeric, EDUCATION_ATTENDANCE_KEYWORDS)
    completion_column = match_column(numeric, EDUCATION_COMPLETION_KEYWORDS)
    rates = {attendance_column, completion_column}

    score_column = match_column(numeric, EDUCATION_SCORE_KEYWORDS, exclude=rates)
    if score_column is None:
        score_column = next((name for name in numeric if name not in rates), None)

    if score_column is None:
        insights.append("No numeric score column detected")
    else:
        scores = column_stats(report, score_column)
        insights.append(
            f"Average score ('{score_column}'): {scores['mean']:,.2f} "
            f"(median {scores['median']:,.2f}, max {scores['max']:,.2f})"
        )

    if attendance_column:
        insights.append(
            f"Average attendance rate: {column_stats(report, attendance_column)['mean']:.2f}%"
        )
    if completion_column:
        insights.append(
            f"Average completion rate: {column_stats(report, completion_column)['mean']:.2f}%"
        )

    for keywords, label in ((EDUCATION_SUBJECT_KEYWORDS, 'subject'),
                            (EDUCATION_STUDENT_KEYWORDS, 'student')):
        column = match_column(categorical, keywords)
        if column:
            unique = report['columns'][column].get('uniqueCount', 0)
            insights.append(f"Records cover {unique} {label}(s) in '{column}'")

    return insights


CATEGORY_HANDLERS = {
    'retail': retail_insights,
    'finance': finance_insights,
    'healthcare': healthcare_insights,
    'manufacturing': manufacturing_insights,
    'education': education_insights,
}


def category_insights(report, category):
    """
    Insight sentences specific to the upload's business category.

    No category (or 'General') adds nothing; an unrecognised category adds a
    single sentence saying so.
    """
    name = (category or '').strip().lower()
    if not name or name == GENERAL:
        return []

    handler = CATEGORY_HANDLERS.get(name)
    if handler is None:
        logging.info(f"No insight handler for category '{category}'")
        return [f"Unknown category '{category}'. No specific insights generated"]
    return handler(report)
