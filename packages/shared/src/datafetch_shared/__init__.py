"""Shared infrastructure for the datafetch ingestion platform.

Provides the tabular Dataframe model, the request/result envelopes that cross
the Temporal activity boundary, task queue constants, worker settings and the
Temporal client connection factory.
"""
