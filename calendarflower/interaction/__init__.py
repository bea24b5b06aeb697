from .hover import HoverState, MirrorContent, PetalHoverController, RingHoverController
