from .yaml_rules import ExportRules, create_sample_rules, level_predicate, load_rules

__all__ = ['ExportRules', 'create_sample_rules', 'level_predicate', 'load_rules']
