"""Starter configuration written by ``commitgate init``."""

DEFAULT_CONF = """\
; commitgate configuration
[general]
project = my-project

[checks]
; issues from checks listed under error block the commit,
; issues from checks listed under warning are reported only
error = binary
; warning =

[checks "binary"]
; <path regular expression> = <size limit, suffix b, k or m>
; the first matching pattern wins
.*\\.jar = 1m
.*\\.(png|jpg|gif) = 256k
.* = 64k
"""
