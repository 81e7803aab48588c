"""Operations, contracts and representers.

- **contract**: Pydantic form objects wrapping a domain model
- **representer**: Declarative JSON mapping in both directions
- **hypermedia**: ``_links`` rendering for representers
- **inference**: Representers built from contract declarations
- **operation**: Request-handling units tying the three together
"""
