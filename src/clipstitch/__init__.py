"""clipstitch — join video clips with transitions through ffmpeg.

Plan how a list of clips should be combined (stream-copy concat or a
re-encoding filter graph with cross-fades), assemble the ffmpeg command,
and run it in a scratch workspace. Also ships single-clip edits (trim,
crop, delogo, letterbox, audio extraction) and a frame preview with a
filter-less fallback.
"""
