"""HTTP service exposing CircleCI trace listings."""
