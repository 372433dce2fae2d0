from datetime import datetime
import json

import numpy as np
import pandas as pd
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

STATUS_PENDING = 'pending'
STATUS_READY = 'ready'
STATUS_FAILED = 'failed'


def make_json_serializable(obj):
    """Convert numpy types and other non-serializable objects to JSON-compatible types"""
    if isinstance(obj, dict):
        return {str(key): make_json_serializable(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_json_serializable(item) for item in obj]
    elif isinstance(obj, (np.bool_, bool)):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return None if np.isnan(obj) else float(obj)
    elif isinstance(obj, float):
        return None if obj != obj else obj
    elif isinstance(obj, np.ndarray):
        return make_json_serializable(obj.tolist())
    elif hasattr(obj, 'isoformat'):  # datetime objects
        return obj.isoformat()
    elif obj is not None and not isinstance(obj, (str, int)) and pd.isna(obj):
        return None
    return obj


class UploadedFile(db.Model):
    """An uploaded spreadsheet and its stored analysis report"""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    original_name = db.Column(db.String(255), nullable=False)
    file_type = db.Column(db.String(10), nullable=False)
    file_path = db.Column(db.String(500), nullable=False)
    file_size = db.Column(db.Integer)
    category = db.Column(db.String(64), default='General')
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow)
    download_count = db.Column(db.Integer, default=0)

    analysis_status = db.Column(db.String(20), default=STATUS_PENDING)
    analysis_error = db.Column(db.Text)
    analysis_results = db.Column(db.Text)  # JSON string of the report
    analyzed_at = db.Column(db.DateTime)

    def set_results(self, report_dict):
        """Store an analysis report as JSON and mark the file ready"""
        self.analysis_results = json.dumps(make_json_serializable(report_dict))
        self.analysis_status = STATUS_READY
        self.analysis_error = None
        self.analyzed_at = datetime.utcnow()

    def set_failed(self, message):
        self.analysis_status = STATUS_FAILED
        self.analysis_error = message
        self.analysis_results = None

    def get_results(self):
        """Retrieve the stored report as a dictionary"""
        if self.analysis_results:
            return json.loads(self.analysis_results)
        return {}

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'original_name': self.original_name,
            'file_type': self.file_type,
            'file_size': self.file_size,
            'category': self.category,
            'uploaded_at': self.uploaded_at.isoformat() if self.uploaded_at else None,
            'download_count': self.download_count or 0,
            'analysis_status': self.analysis_status,
            'analysis_error': self.analysis_error,
            'analyzed_at': self.analyzed_at.isoformat() if self.analyzed_at else None,
        }
