"""Thumbnail algorithms: orientation, sizing, still encoding and video transcoding."""
