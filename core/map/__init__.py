"""Reference map handling: loading, calibration and validation"""
