# Copyright 2024-present Kensho Technologies, LLC.
