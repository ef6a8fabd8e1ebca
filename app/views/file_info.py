from textual.widgets import Static

class FileInfo(Static):
    def update_info(self, info, preview=None):
        lines = []
        if info:
            lines.append(f"[b]File:[/b] {info.path.name}")
            lines.append(f"Staged: {info.path}")
            lines.append(f"Size: {info.size} bytes")
            lines.append(f"SHA256: {info.sha256}")
            lines.append(f"MIME: {info.mime}")
            if preview:
                lines.append(f"Preview: {preview.uri}")
        else:
            lines.append("No file loaded.")
        self.update("\n".join(lines))
