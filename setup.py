"""
Retail Data Analysis Service Setup Instructions

To run this application on your local system:

1. Install Python 3.11+ if not already installed

2. Create a virtual environment:
   python -m venv data_analysis_env

3. Activate the virtual environment:
   - Windows: data_analysis_env\\Scripts\\activate
   - Mac/Linux: source data_analysis_env/bin/activate

4. Install the package and its requirements:
   pip install -e .
   pip install -e .[test]        # test tooling
   pip install -e .[postgres]    # PostgreSQL DATABASE_URL support

5. Set environment variables (optional):
   - SESSION_SECRET=your-secret-key-here
   - DATABASE_URL=sqlite:///data_analysis.db (default)
   - UPLOAD_FOLDER=uploads, EXPORT_FOLDER=exports
   - ANALYSIS_MAX_ROWS=10000, ANALYSIS_WORKERS=4
   - LOG_LEVEL=DEBUG

6. Run the application:
   python main.py

   Or with gunicorn:
   gunicorn --bind 0.0.0.0:5000 --reuse-port --reload main:app

7. Analyze files from the command line:
   python analysis_exporter.py sales.csv -o sales_report.json

8. Run the tests:
   pytest

File Structure:
├── main.py                      # Entry point
├── app.py                       # Flask app configuration
├── models.py                    # Database models
├── routes.py                    # API routes
├── analysis_exporter.py         # Command line analysis
├── analyzers/
│   ├── analysis_engine.py       # Full analysis pipeline
│   ├── column_classifier.py     # Column kind detection
│   ├── descriptive_stats.py     # Numeric stats and distributions
│   ├── correlation_analyzer.py  # Pearson correlations
│   ├── role_detector.py         # Key/measure/date role detection
│   ├── grouping_analyzer.py     # Group-by aggregation
│   ├── time_series_analyzer.py  # Date bucketing
│   ├── trend_analyzer.py        # Linear trend and forecast
│   └── outlier_analyzer.py      # IQR outliers
├── parsers/
│   ├── file_parser.py           # Base parser
│   ├── csv_parser.py            # CSV parser
│   └── excel_parser.py          # Excel parser
└── utils/
    ├── data_insights.py         # Insight sentences
    ├── export_utils.py          # Report export
    ├── parallel.py              # Transform worker pool
    └── value_parsing.py         # Number/date coercion
"""
from setuptools import setup, find_namespace_packages

setup(
    name='retail-data-analyzer',
    version='1.0.0',
    description='Tabular dataset analysis service for retail BI',
    python_requires='>=3.9',
    packages=find_namespace_packages(include=['analyzers*', 'parsers*', 'utils*']),
    py_modules=['app', 'main', 'models', 'routes', 'analysis_exporter'],
    install_requires=[
        'Flask>=2.3',
        'Flask-SQLAlchemy>=3.0.5',
        'Werkzeug>=2.3',
        'gunicorn>=21.2',
        'pandas>=2.0',
        'numpy>=1.25',
        'openpyxl>=3.1',
        'xlrd>=2.0.1',
        'scikit-learn>=1.3',
        'scipy>=1.11',
    ],
    extras_require={
        'test': ['pytest>=7.4'],
        'postgres': ['psycopg2-binary>=2.9.7'],
    },
    entry_points={
        'console_scripts': [
            'analyze-files=analysis_exporter:main',
        ],
    },
)
