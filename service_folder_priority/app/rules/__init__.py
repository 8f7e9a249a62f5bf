"""
Rules package.

Parses folder priority rules from configuration and resolves a document
path to a priority. Two strategies exist:

- substring: longest matching rule key wins, otherwise the default.
- segment: the folder after a configured anchor folder encodes the
  priority in its fifth character.

Modules of interest:
- models: RuleSet, PriorityConfig and strategy enums.
- loader: Rule string parsing.
- engine: Resolver objects and strategy selection.
"""
