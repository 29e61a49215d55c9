"""Release content and version pipeline.

- version / changenotes / store: version bumps and the change note record
- expression / document / render: description templates and markup dialects
- forum_post: size-bounded forum post composition
- pipeline / steps: the ordered release steps and their sequencer
- gh / workshop / forum / build: distribution collaborators
"""

from __future__ import annotations
