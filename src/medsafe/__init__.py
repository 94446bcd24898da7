"""Medication safety evaluator.

This package checks a patient's medication list against bundled reference
tables and reports drug-drug interactions, allergy contraindications,
monitoring needs, an overall risk level and recommendations.

The core is ``medsafe.evaluator.evaluate``; ``medsafe.app`` serves it over
HTTP.
"""
