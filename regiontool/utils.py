import datetime

hexdump_map_hex = tuple( format(i, '02x') for i in range(256) )
hexdump_map_txt = "".join(("."*32, *(chr(i) for i in range(32,127)), "."*129))

def hexdump(data, maxlines=-1, compact=True, base=0):
    """ Yield the lines of an hex/ascii dump of the data

        Runs of identical lines are replaced by a single `*` when `compact`
        is set. `base` is the address displayed for the first byte.
    """
    data = memoryview(data).cast('B')
    addr = base
    previous = ""
    starred = False
    while maxlines != 0:
        if not data:
            if starred:
                yield previous
            break

        line, data = data[:16], data[16:]

        hex = " ".join(hexdump_map_hex[b] for b in line)
        ascii = "".join(hexdump_map_txt[b] for b in line)

        line = "{:08x}    {:48s}  |{:16s}|".format(addr, hex, ascii)
        if not compact or maxlines==1:
            yield line
        elif line[8:] == previous[8:]:
            if not starred:
                starred = True
                yield '*'
        else:
            if starred and previous:
                yield previous

            starred = False
            yield line

        previous = line
        maxlines -= 1
        addr += 16

def format_timestamp(timestamp):
    """ Human readable form of a chunk timestamp
    """
    if timestamp == 0:
        return "never"

    return datetime.datetime.fromtimestamp(timestamp, datetime.timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
