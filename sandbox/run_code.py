#!/usr/bin/env python3
"""Runs one submission inside the sandbox container.

Usage: python run_code.py <submission_file> <input_json_file>

Prints a single JSON line: {"success": ..., "output": ..., "error": ...}
Runs as a script with solution_runtime.py in the same directory.
"""
import json
import sys

from solution_runtime import run_solution


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python run_code.py <submission_file> <input_json_file>")
        sys.exit(1)

    with open(sys.argv[1], "r", encoding="utf-8-sig") as f:
        code = f.read()
    with open(sys.argv[2], "r", encoding="utf-8") as f:
        input_value = json.load(f)

    result = run_solution(code, input_value)
    # Submission prints may precede this; the result is always the last line.
    sys.stdout.write("\n" + json.dumps(result) + "\n")
