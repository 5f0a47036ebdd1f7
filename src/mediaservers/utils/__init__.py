"""Nostr key handling and the nostr-sdk relay transport.

Attributes:
    keys: ``npub1`` decoding and public key parsing.
    protocol: Client factory and the one-shot multi-relay fetch used as
        the resolver's default transport.

Note:
    The utils layer imports from [mediaservers.models][mediaservers.models]
    and [mediaservers.core.exceptions][mediaservers.core.exceptions] only,
    never from [mediaservers.services][mediaservers.services].
"""
