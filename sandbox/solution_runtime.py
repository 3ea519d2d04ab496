"""Compiles and runs one submission. Standard library only.

Shared by every execution strategy: the API process (inline), the spawned
child of the process executor, and the container runner (``run_code.py``,
copied into the container next to this file). Keep imports light: a spawned
child pays for them before the submission starts.
"""
import builtins
import json
import textwrap

FUNCTION_NAME = "solution"

# First message a worker puts on its queue, before running any user code
READY = "ready"


def build_function_source(code):
    body = textwrap.indent(code, "    ") if code.strip() else "    pass"
    return f"def {FUNCTION_NAME}(input):\n{body}\n"


def invoke_submission(code, input_value):
    """Compile the submission in a fresh namespace and call it.

    The namespace only exposes builtins; the test input is the sole argument.
    Errors from the submitted code propagate to the caller.
    """
    namespace = {"__builtins__": builtins}
    exec(compile(build_function_source(code), "<submission>", "exec"), namespace)
    return namespace[FUNCTION_NAME](input_value)


def describe_error(exc):
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


def to_json_value(value):
    """The value as it reads back from JSON: tuples become lists, dict keys strings."""
    return json.loads(json.dumps(value))


def run_solution(code, input_value):
    """Run the submission once and return a JSON-ready result dict."""
    try:
        output = invoke_submission(code, input_value)
    except (Exception, SystemExit) as e:
        return {"success": False, "output": None, "error": describe_error(e)}

    try:
        output = to_json_value(output)
    except (TypeError, ValueError, RecursionError) as e:
        return {"success": False, "output": None, "error": f"Result is not serializable: {describe_error(e)}"}
    return {"success": True, "output": output, "error": None}


def process_worker(code, input_value, result_queue):
    """Target of the process executor's child."""
    result_queue.put(READY)
    result_queue.put(run_solution(code, input_value))
