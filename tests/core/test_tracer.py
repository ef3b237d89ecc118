"""
Tests for the Tracing System.
"""

import json

from typed_rewrite.core.tracer import TraceEventType, TraceLogger, get_tracer, reset_tracer


def test_phase_nesting():
  logger = TraceLogger()

  p1 = logger.start_phase("Parent")
  logger.start_phase("Child")
  logger.end_phase()  # End Child
  logger.end_phase()  # End Parent

  events = logger.export()

  # 4 events: Start P, Start C, End C, End P
  assert len(events) == 4
  assert events[0]["type"] == TraceEventType.PHASE_START
  assert events[1]["parent_id"] == p1
  assert events[2]["type"] == TraceEventType.PHASE_END


def test_end_phase_without_active_phase_is_ignored():
  logger = TraceLogger()
  logger.end_phase()
  assert logger.export() == []


def test_events_attach_to_current_phase():
  logger = TraceLogger()
  phase = logger.start_phase("Rewrite Engine")
  logger.log_mutation("BinaryOperation", "[0, 3)", "a+b", "complex_add(a,b)")
  logger.log_warning("left alone")
  logger.log_inspection("a % b", "skipped", "unsupported operator '%'")

  events = logger.export()[1:]
  assert [e["type"] for e in events] == [
    TraceEventType.AST_MUTATION,
    TraceEventType.ANALYSIS_WARNING,
    TraceEventType.INSPECTION,
  ]
  assert all(e["parent_id"] == phase for e in events)
  assert events[0]["description"] == "Rewrote BinaryOperation"
  assert events[2]["metadata"]["outcome"] == "skipped"


def test_export_is_json_serializable():
  logger = TraceLogger()
  logger.start_phase("Parsing", "cpp front end")
  logger.log_mutation("CALL_EXPR operator+", "[4, 9)", "a + b", "complex_add(a,b)")
  logger.end_phase()

  payload = json.loads(json.dumps(logger.export()))
  assert payload[1]["metadata"]["after"] == "complex_add(a,b)"


def test_reset_replaces_global_instance():
  first = get_tracer()
  first.log_warning("stale")
  reset_tracer()
  assert get_tracer() is not first
  assert get_tracer().export() == []
