"""
Data Processing Module

This module contains the k-means + PCA workflow:
- Preprocessing (NA policy, exclusion, one hot encoding, normalization)
- Elbow sweep and k-means clustering
- Cluster profiling and PCA projection
- Diagnostic charts
"""
