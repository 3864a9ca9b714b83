"""Pipeline stages.

- parse_kml: KML text → ParsedDocument
- analyze_feature: Feature → AnalysisResult
"""
