"""Tranquiloo triage services.

Message flow:
- Safety Service assesses crisis risk first and can short-circuit everything
- Triage Service then cascades provider A -> provider B -> local generator
- Language, Context and Indicator services are pure leaf analyzers used by
  the local generator and the pipeline
"""
