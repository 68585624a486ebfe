"""EIP-712 typed data hashing and derivation of types from ABI tuples."""