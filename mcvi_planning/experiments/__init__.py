"""Experiment runners, configurations and result I/O."""
