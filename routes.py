import os
import logging
from flask import request, jsonify, send_file, current_app
from werkzeug.utils import secure_filename

from models import db, make_json_serializable, UploadedFile
from parsers.file_parser import FileParserFactory
from analyzers.dataset import Dataset
from analyzers.errors import InputTooLargeError
from analyzers.grouping_analyzer import AGGREGATIONS
from utils.data_insights import DataInsights
from utils.export_utils import ExportUtils, EXPORT_FORMATS

ALLOWED_EXTENSIONS = {'csv', 'xls', 'xlsx'}


def allowed_file(filename):
    """Check if file extension is allowed"""
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def error_response(message, status):
    return jsonify({'status': 'error', 'message': message}), status


def get_user_file(user_id, file_id):
    """Uploaded file owned by the user, or None"""
    uploaded_file = db.session.get(UploadedFile, file_id)
    if uploaded_file is None or uploaded_file.user_id != user_id:
        return None
    return uploaded_file


def load_dataset(uploaded_file):
    """Parse a stored upload into a Dataset"""
    parser = FileParserFactory().get_parser(uploaded_file.file_type)
    return Dataset.from_dataframe(parser.parse(uploaded_file.file_path))


def run_file_analysis(uploaded_file, overrides=None, aggregation='sum'):
    """Analyze an uploaded file; returns the JSON-ready report dict"""
    engine = current_app.extensions['analysis_engine']
    dataset = load_dataset(uploaded_file)
    report = engine.analyze(dataset, overrides=overrides, aggregation=aggregation)
    return make_json_serializable(report.to_dict())


def analysis_failed(uploaded_file, message, status, record):
    """Error response for a failed analysis; only stored runs mark the file failed"""
    if record:
        uploaded_file.set_failed(message)
        db.session.commit()
    return error_response(message, status)


def register_routes(app):
    """Register all routes with the Flask app"""

    @app.errorhandler(413)
    def request_too_large(e):
        return error_response(
            f"File exceeds the {app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)}MB upload limit", 413
        )

    @app.route('/files/upload/<user_id>', methods=['POST'])
    def api_upload_file(user_id):
        """Store an uploaded spreadsheet for later analysis"""
        file = request.files.get('file')

        if file is None or file.filename == '':
            return error_response('No file selected', 400)

        if not allowed_file(file.filename):
            return error_response(
                f"Only {', '.join(sorted(ALLOWED_EXTENSIONS))} files are allowed", 400
            )

        try:
            filename = secure_filename(file.filename)
            user_folder = os.path.join(current_app.config['UPLOAD_FOLDER'], secure_filename(user_id))
            os.makedirs(user_folder, exist_ok=True)

            uploaded_file = UploadedFile(
                user_id=user_id,
                original_name=filename,
                file_type=filename.rsplit('.', 1)[1].lower(),
                file_path='',
                category=request.form.get('category', 'General'),
            )
            db.session.add(uploaded_file)
            db.session.flush()

            file_path = os.path.join(user_folder, f"{uploaded_file.id}_{filename}")
            file.save(file_path)
            uploaded_file.file_path = file_path
            uploaded_file.file_size = os.path.getsize(file_path)
            db.session.commit()

            logging.info(f"Stored upload {filename} for user {user_id} as file {uploaded_file.id}")
            return jsonify({
                'status': 'success',
                'message': 'File uploaded successfully',
                'file': uploaded_file.to_dict()
            })

        except Exception as e:
            db.session.rollback()
            logging.error(f"Upload error: {str(e)}")
            return error_response(f'Upload failed: {str(e)}', 500)

    @app.route('/files/all/<user_id>')
    def api_list_files(user_id):
        """List a user's uploaded files, newest first"""
        files = UploadedFile.query.filter_by(user_id=user_id) \
            .order_by(UploadedFile.uploaded_at.desc()).all()
        return jsonify({
            'status': 'success',
            'files': [f.to_dict() for f in files]
        })

    @app.route('/files/analyse/<user_id>/<int:file_id>')
    def api_analyse_file(user_id, file_id):
        """
        Return the stored report, running the analysis first when needed.

        Role overrides and non-sum aggregations produce a one-off view that
        is returned but never replaces the stored default report.
        """
        uploaded_file = get_user_file(user_id, file_id)
        if not uploaded_file:
            return error_response('File not found', 404)

        refresh = request.args.get('refresh', '').lower() in ('1', 'true', 'yes')
        overrides = {
            role: request.args.get(role)
            for role in ('key', 'measure', 'date')
            if request.args.get(role)
        }
        aggregation = request.args.get('aggregation', 'sum').lower()
        if aggregation not in AGGREGATIONS:
            return error_response(
                f"Unsupported aggregation: {aggregation}. Use one of {', '.join(AGGREGATIONS)}", 400
            )

        custom_view = bool(overrides) or aggregation != 'sum'
        results = {} if custom_view or refresh else uploaded_file.get_results()

        if not results:
            try:
                logging.info(f"Analyzing file {file_id} for user {user_id}")
                results = run_file_analysis(uploaded_file, overrides, aggregation)
                if not custom_view:
                    uploaded_file.set_results(results)
                    db.session.commit()

            except InputTooLargeError as e:
                return analysis_failed(uploaded_file, str(e), 413, record=not custom_view)

            except ValueError as e:
                return analysis_failed(uploaded_file, str(e), 400, record=not custom_view)

            except Exception as e:
                logging.error(f"Analysis error: {str(e)}")
                return analysis_failed(
                    uploaded_file, f'Analysis failed: {str(e)}', 500, record=not custom_view
                )

        return jsonify({
            'status': 'success',
            'message': 'Analysis performed successfully',
            'file_id': uploaded_file.id,
            'category': uploaded_file.category,
            'stored': not custom_view,
            'results': results,
            'insights': DataInsights.generate(results, uploaded_file.category)
        })

    @app.route('/files/download/<user_id>/<int:file_id>')
    def api_download_file(user_id, file_id):
        """Download the original upload"""
        uploaded_file = get_user_file(user_id, file_id)
        if not uploaded_file or not os.path.exists(uploaded_file.file_path):
            return error_response('File not found', 404)

        uploaded_file.download_count = (uploaded_file.download_count or 0) + 1
        db.session.commit()
        return send_file(
            os.path.abspath(uploaded_file.file_path),
            as_attachment=True,
            download_name=uploaded_file.original_name
        )

    @app.route('/files/export/<user_id>/<int:file_id>/<format>')
    def api_export_results(user_id, file_id, format):
        """Export a stored report"""
        uploaded_file = get_user_file(user_id, file_id)
        if not uploaded_file:
            return error_response('File not found', 404)

        if format.lower() not in EXPORT_FORMATS:
            return error_response(f'Unsupported export format: {format}', 400)

        results = uploaded_file.get_results()
        if not results:
            return error_response('No analysis results to export', 400)

        try:
            export_utils = ExportUtils(current_app.config['EXPORT_FOLDER'])
            name = uploaded_file.original_name.rsplit('.', 1)[0]
            file_path = export_utils.export(results, format, name, uploaded_file.category)
            return send_file(os.path.abspath(file_path), as_attachment=True)

        except Exception as e:
            logging.error(f"Export error: {str(e)}")
            return error_response(f'Export failed: {str(e)}', 500)

    @app.route('/files/<user_id>/<int:file_id>', methods=['DELETE'])
    def api_delete_file(user_id, file_id):
        """Delete an upload and its stored report"""
        uploaded_file = get_user_file(user_id, file_id)
        if not uploaded_file:
            return error_response('File not found', 404)

        try:
            if os.path.exists(uploaded_file.file_path):
                os.remove(uploaded_file.file_path)

            name = uploaded_file.original_name
            db.session.delete(uploaded_file)
            db.session.commit()

            return jsonify({
                'status': 'success',
                'message': 'File deleted successfully',
                'file_name': name
            })

        except Exception as e:
            db.session.rollback()
            logging.error(f"Delete file error: {str(e)}")
            return error_response(f'Delete failed: {str(e)}', 500)
