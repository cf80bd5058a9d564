"""Report aggregation and data contract.

Raw crawl inputs are parsed, aggregated and frozen into a single
``ReportData`` value that every template and renderer consumes.

Use explicit imports:
    from report_worker.reports.contract import ReportData, ReportVersion
    from report_worker.reports.assembler import ReportAssembler, aggregate
"""
