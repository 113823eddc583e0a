DESCRIPTOR_GRAMMAR = r"""
start: pair ("," pair)* ","?

pair: KEY "=" value?

?value: CHARSET | BARE

KEY: /[A-Za-z_][A-Za-z0-9_]*/

// goodchars=[...] may itself contain '=' and '|'
CHARSET: /\[[^\]]*\]/
BARE: /[^,\s\[][^,\s]*/
"""
