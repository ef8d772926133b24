"""
Agent implementations for StoryPulse.

Contains all modules that process story OCR text through the pipeline:
- Ingestion Agent
- Answer Extraction Agent (with candidate validation)
- Quality Analyzer
- Statistics Engine
- Aggregation (Story Overview)
"""
