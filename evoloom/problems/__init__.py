from evoloom.problems.strings import StringEvaluator, build_string_engine
