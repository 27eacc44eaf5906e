"""
Core Utilities Package

- threading_utils: OffloadExecutor (worker pool cho CPU-bound work)
"""
