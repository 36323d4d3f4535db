from personachat.cli import main

main()
