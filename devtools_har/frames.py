# Copyright 2019 WebPageTest LLC.
# Copyright 2017 Google Inc.
# Copyright 2020 Catchpoint Systems Inc.
# Use of this source code is governed by the Polyform Shield 1.0.0 license that can be
# found in the LICENSE.md file.
"""Frame to root frame mapping"""


class FrameResolver(object):
    """Maps every attached frame straight to its top-level frame"""
    def __init__(self):
        self.root_frames = {}

    def attach(self, frame_id, parent_id):
        """Record a frame attachment, resolving the parent chain up front"""
        self.root_frames[frame_id] = parent_id
        seen = set([frame_id])
        grand_parent_id = self.root_frames.get(parent_id)
        while grand_parent_id and grand_parent_id not in seen:
            seen.add(grand_parent_id)
            self.root_frames[frame_id] = grand_parent_id
            grand_parent_id = self.root_frames.get(grand_parent_id)

    def is_sub_frame(self, frame_id):
        return frame_id in self.root_frames

    def root_frame(self, frame_id):
        """The top-level frame for frame_id (itself if it isn't a sub-frame)"""
        return self.root_frames.get(frame_id) or frame_id
