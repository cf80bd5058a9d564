"""Issue catalog and ROI classification.

Use explicit imports when needed:
    from report_worker.fixes.catalog import Severity, IssueCategory, get_pillar
    from report_worker.fixes.roi import RoiClassifier, classify_roi
"""
