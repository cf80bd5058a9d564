"""Enrichment aggregators for visibility, competitors, content health and integrations."""

# Use explicit imports when needed:
# from report_worker.enrichment.envelopes import parse_envelopes
# from report_worker.enrichment.integrations import aggregate_integrations
# from report_worker.enrichment.competitors import aggregate_competitors, find_gap_queries
# from report_worker.enrichment.visibility import aggregate_visibility
# from report_worker.enrichment.content_health import aggregate_content_health
