"""
WebAudit - heuristic website audit service.
"""
