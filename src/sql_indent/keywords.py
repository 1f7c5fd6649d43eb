"""
SQL keyword tables

Fixed lookup data shared by the analyzer and the renderer. Words are stored
upper case; multi-word units map the tuple of their words to the canonical
text used when rendering.
"""

from typing import Dict, FrozenSet, Tuple

KEYWORDS: FrozenSet[str] = frozenset({
    # Query
    'SELECT', 'FROM', 'WHERE', 'AND', 'OR', 'NOT', 'IN', 'BETWEEN', 'LIKE',
    'ILIKE', 'IS', 'NULL', 'AS', 'ON', 'JOIN', 'HAVING', 'LIMIT', 'OFFSET',
    'UNION', 'INTERSECT', 'EXCEPT', 'DISTINCT', 'ALL', 'ASC', 'DESC', 'EXISTS',
    'ANY', 'WITH', 'RECURSIVE', 'RETURNING', 'USING', 'NATURAL', 'FETCH',
    'FIRST', 'NEXT', 'ONLY', 'FOR', 'ORDER', 'GROUP', 'BY', 'TRUE', 'FALSE',
    # Expressions
    'CASE', 'WHEN', 'THEN', 'ELSE', 'END',
    # Window functions
    'WINDOW', 'OVER', 'PARTITION', 'ROWS', 'RANGE', 'UNBOUNDED', 'PRECEDING',
    'FOLLOWING', 'CURRENT', 'ROW',
    # Joins
    'LEFT', 'RIGHT', 'INNER', 'OUTER', 'FULL', 'CROSS',
    # DML
    'INSERT', 'INTO', 'VALUES', 'UPDATE', 'SET', 'DELETE', 'DO', 'CONFLICT',
    'NOTHING',
    # DDL
    'CREATE', 'ALTER', 'DROP', 'TABLE', 'INDEX', 'VIEW', 'COLUMN', 'ADD',
    'PRIMARY', 'KEY', 'FOREIGN', 'REFERENCES', 'UNIQUE', 'DEFAULT', 'CHECK',
    'CONSTRAINT', 'CASCADE', 'RESTRICT', 'IF', 'TEMPORARY', 'TEMP', 'SCHEMA',
    'DATABASE', 'SEQUENCE', 'TRIGGER', 'FUNCTION', 'PROCEDURE', 'TYPE', 'ENUM',
    'TRUNCATE', 'RENAME', 'REPLACE', 'COMMENT', 'TO',
    # Access control and transactions
    'GRANT', 'REVOKE', 'BEGIN', 'COMMIT', 'ROLLBACK', 'SAVEPOINT',
    'TRANSACTION', 'LOCK', 'UNLOCK',
})

MULTI_WORD_KEYWORDS: Dict[Tuple[str, ...], str] = {
    ('LEFT', 'OUTER', 'JOIN'): 'LEFT OUTER JOIN',
    ('RIGHT', 'OUTER', 'JOIN'): 'RIGHT OUTER JOIN',
    ('FULL', 'OUTER', 'JOIN'): 'FULL OUTER JOIN',
    ('IF', 'NOT', 'EXISTS'): 'IF NOT EXISTS',
    ('ORDER', 'BY'): 'ORDER BY',
    ('GROUP', 'BY'): 'GROUP BY',
    ('PARTITION', 'BY'): 'PARTITION BY',
    ('LEFT', 'JOIN'): 'LEFT JOIN',
    ('RIGHT', 'JOIN'): 'RIGHT JOIN',
    ('INNER', 'JOIN'): 'INNER JOIN',
    ('OUTER', 'JOIN'): 'OUTER JOIN',
    ('FULL', 'JOIN'): 'FULL JOIN',
    ('CROSS', 'JOIN'): 'CROSS JOIN',
    ('NATURAL', 'JOIN'): 'NATURAL JOIN',
    ('UNION', 'ALL'): 'UNION ALL',
    ('INSERT', 'INTO'): 'INSERT INTO',
    ('PRIMARY', 'KEY'): 'PRIMARY KEY',
    ('FOREIGN', 'KEY'): 'FOREIGN KEY',
    ('IF', 'EXISTS'): 'IF EXISTS',
    ('NOT', 'BETWEEN'): 'NOT BETWEEN',
    ('ROWS', 'BETWEEN'): 'ROWS BETWEEN',
    ('RANGE', 'BETWEEN'): 'RANGE BETWEEN',
    ('ON', 'CONFLICT'): 'ON CONFLICT',
    ('ON', 'DELETE'): 'ON DELETE',
    ('ON', 'UPDATE'): 'ON UPDATE',
    ('DO', 'UPDATE'): 'DO UPDATE',
    ('DO', 'NOTHING'): 'DO NOTHING',
    ('FOR', 'UPDATE'): 'FOR UPDATE',
}

MAX_UNIT_WORDS = max(len(words) for words in MULTI_WORD_KEYWORDS)

JOIN_KEYWORDS: FrozenSet[str] = frozenset({
    'JOIN', 'LEFT JOIN', 'RIGHT JOIN', 'INNER JOIN', 'OUTER JOIN', 'FULL JOIN',
    'CROSS JOIN', 'NATURAL JOIN', 'LEFT OUTER JOIN', 'RIGHT OUTER JOIN',
    'FULL OUTER JOIN',
})

DDL_KEYWORDS: FrozenSet[str] = frozenset({
    'CREATE', 'ALTER', 'DROP', 'TRUNCATE', 'GRANT', 'REVOKE',
})

SET_OPERATORS: FrozenSet[str] = frozenset({
    'UNION', 'UNION ALL', 'INTERSECT', 'EXCEPT',
})

# Keywords that start a new clause head inside a query context
CLAUSE_KEYWORDS: FrozenSet[str] = frozenset({
    'SELECT', 'FROM', 'WHERE', 'GROUP BY', 'HAVING', 'ORDER BY', 'LIMIT',
    'OFFSET', 'FETCH', 'WINDOW', 'WITH', 'INSERT', 'INSERT INTO', 'VALUES',
    'UPDATE', 'SET', 'DELETE', 'RETURNING', 'ON CONFLICT',
}) | SET_OPERATORS | JOIN_KEYWORDS | DDL_KEYWORDS

# Clauses where AND / OR start a new line
CONDITION_CLAUSES: FrozenSet[str] = frozenset({'WHERE', 'HAVING'}) | JOIN_KEYWORDS

# Clauses whose body keeps heads inline (GRANT SELECT ON ...)
PRIVILEGE_CLAUSES: FrozenSet[str] = frozenset({'GRANT', 'REVOKE'})

# Clause heads that always share their line with the first item
PACKED_CLAUSES: FrozenSet[str] = JOIN_KEYWORDS | DDL_KEYWORDS

# Clause heads packed only when the body is a single token
SHORT_CLAUSES: FrozenSet[str] = frozenset({'LIMIT', 'OFFSET'})

# Keywords that double as function names: LEFT(name, 3)
FUNCTION_KEYWORDS: FrozenSet[str] = frozenset({'LEFT', 'RIGHT', 'REPLACE'})

# Keywords that end an operand, so a following +/- is binary
VALUE_KEYWORDS: FrozenSet[str] = frozenset({
    'NULL', 'TRUE', 'FALSE', 'END', 'ROW', 'CURRENT',
})

BETWEEN_KEYWORDS: FrozenSet[str] = frozenset({
    'BETWEEN', 'NOT BETWEEN', 'ROWS BETWEEN', 'RANGE BETWEEN',
})

# Operators rendered without surrounding spaces: col::int, data->>'key'
TIGHT_OPERATORS: FrozenSet[str] = frozenset({'::', '->', '->>', '#>', '#>>'})


def lookup_unit(words: Tuple[str, ...]) -> str:
    """Return the canonical keyword for a tuple of upper case words, or ''."""
    if len(words) == 1:
        return words[0] if words[0] in KEYWORDS else ''
    return MULTI_WORD_KEYWORDS.get(words, '')
