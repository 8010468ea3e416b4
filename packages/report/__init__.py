from .io import new_run_id, read_rules_file, run_record, write_run_record, write_word_list

__all__ = ["new_run_id", "read_rules_file", "run_record", "write_run_record", "write_word_list"]
