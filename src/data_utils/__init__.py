"""
Data Utils Package

This package provides the data model and the row preparation steps between
indicator enrichment and model evaluation, organized into focused modules:

- schemas: Bar, EnrichedBar, SupervisedRow and SupervisedFrame
- feature_engineering: Derived price features of the current bar
- target_engineering: Next-bar-close labelling (SupervisedFrameBuilder)
- split_planner: Holdout split and walk-forward folds
"""
